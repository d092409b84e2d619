"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계좌 CRUD
- transactions: 거래 생성/수정/삭제 (잔액 반영)
- budgets: 월별 예산
- dashboard: 대시보드 요약, 월간 리포트
"""
