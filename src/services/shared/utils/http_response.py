import json


def api_response(status_code: int, body: dict) -> dict:
    """API Gateway のプロキシ統合レスポンス形式を生成する"""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        # Decimal・datetime は文字列として出力する
        "body": json.dumps(body, default=str),
    }


def api_error_response(
    status_code: int, code: str, message: str, context: dict | None = None
) -> dict:
    """エラー本文を {code, message, context} に揃える"""
    return api_response(
        status_code, {"code": code, "message": message, "context": context or {}}
    )
