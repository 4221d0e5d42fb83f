"""Validation helpers used by record factories and callers."""

import math
from datetime import datetime

from pocketlog.domain.exceptions import ValidationError
from pocketlog.domain.services.datetimes import normalize_to_utc

MIN_TEMPERATURE = -60.0
MAX_TEMPERATURE = 60.0


def require_text(value: str | None, field: str) -> str:
    """空でない文字列を要求し、前後の空白を除去して返す

    Args:
        value: 検証する文字列
        field: フィールド名

    Returns:
        前後の空白を除去した文字列

    Raises:
        ValidationError: None または空白のみの場合
    """
    if value is None or not value.strip():
        raise ValidationError(field, "must not be empty")
    return value.strip()


def optional_text(value: str | None) -> str | None:
    """空白のみの文字列を None に正規化する"""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def limit_length(value: str, field: str, max_length: int) -> str:
    """文字数の上限を検証する

    Raises:
        ValidationError: 上限を超えた場合
    """
    if len(value) > max_length:
        raise ValidationError(field, f"must be at most {max_length} characters")
    return value


def validate_price(price: float | None, field: str = "price") -> float | None:
    """価格を検証する（None は未設定として許可）

    Raises:
        ValidationError: 負数または有限でない場合
    """
    if price is None:
        return None
    if not math.isfinite(price):
        raise ValidationError(field, "must be a finite number")
    if price < 0:
        raise ValidationError(field, "must not be negative")
    return float(price)


def parse_price(text: str | None, field: str = "price") -> float | None:
    """入力文字列を価格に変換する

    空文字列は未設定（None）として扱う。

    Args:
        text: 入力文字列
        field: フィールド名

    Returns:
        価格、または None

    Raises:
        ValidationError: 数値として解釈できない、または負数の場合
    """
    if text is None or not text.strip():
        return None
    try:
        price = float(text.strip())
    except ValueError:
        raise ValidationError(field, "must be a valid number") from None
    return validate_price(price, field)


def validate_temperature(temperature: float, field: str = "temperature") -> float:
    """気温を検証する（-60 から 60 の範囲）

    Raises:
        ValidationError: 範囲外または有限でない場合
    """
    if not math.isfinite(temperature) or not (
        MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE
    ):
        raise ValidationError(
            field, f"must be between {MIN_TEMPERATURE:g} and {MAX_TEMPERATURE:g}"
        )
    return float(temperature)


def validate_date_order(
    start: datetime, end: datetime, field: str = "end"
) -> datetime:
    """end が start 以降であることを検証する

    naive な日時は UTC とみなして比較する。

    Raises:
        ValidationError: end が start より前の場合
    """
    if normalize_to_utc(end) < normalize_to_utc(start):
        raise ValidationError(field, "must not be earlier than the start date")
    return end
