class DomainException(Exception):
    """ドメイン層で発生する基底例外

    - code: 呼び出し側が分岐に使う安定した識別子
    - context: ログ・レスポンスに載せる構造化情報
    """

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class ResourceNotFoundException(DomainException):
    """リソースが見つからない場合"""

    code = "RESOURCE_NOT_FOUND"


class BusinessRuleViolationException(DomainException):
    """ビジネスルールに違反した場合"""

    code = "BUSINESS_RULE_VIOLATION"


class DuplicateResourceException(DomainException):
    """リソースの重複エラー（条件付き書き込みの失敗時）"""

    code = "DUPLICATE_RESOURCE"


class OptimisticLockException(DomainException):
    """楽観ロックの競合エラー（ステータスが期待値と異なる場合）"""

    code = "OPTIMISTIC_LOCK_CONFLICT"
