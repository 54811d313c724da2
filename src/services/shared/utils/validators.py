from decimal import Decimal, InvalidOperation


def to_decimal(v: object) -> Decimal:
    """任意の値を Decimal に変換する

    Pydantic の field_validator (mode="before") やドメインの値オブジェクトから
    呼び出すことを想定。すでに Decimal の場合はそのまま返し、それ以外は str 経由で
    変換する（float の二進誤差を持ち込まないため）。
    """
    if isinstance(v, Decimal):
        return v
    if isinstance(v, bool):
        raise ValueError(f"Cannot convert bool to Decimal: {v}")
    try:
        return Decimal(str(v))
    except InvalidOperation as e:
        raise ValueError(f"Cannot convert to Decimal: {v!r}") from e
