"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- auth: 회원가입 / 로그인
- users: 프로필
- wallets: 지갑 및 잔액 재계산
- categories: 카테고리
- transactions: 수입/지출 거래
- transfers: 지갑 간 이체
- budgets: 월별 예산
- reports: 대시보드 집계
- notifications: 알림 설정 / 디바이스 토큰
"""
