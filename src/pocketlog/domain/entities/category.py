"""Category variant: fixed built-in categories or user-defined custom ones."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypeAlias
from uuid import UUID

from pocketlog.domain.entities.record import Record


class DisplayableCategory(Protocol):
    """表示用の名前・アイコン・色を持つカテゴリ enum"""

    @property
    def display_name(self) -> str: ...

    @property
    def icon(self) -> str: ...

    @property
    def color(self) -> str: ...


@dataclass(frozen=True)
class CustomCategory(Record):
    """ユーザー定義カテゴリ

    Attributes:
        name: カテゴリ名
        icon: アイコン名
        color: 色名
    """

    name: str
    icon: str = "folder"
    color: str = "primaryBlue"


@dataclass(frozen=True)
class BuiltinCategory:
    """組み込みカテゴリ（固定の enum メンバーを参照）"""

    value: Enum


@dataclass(frozen=True)
class CustomCategoryRef:
    """カスタムカテゴリへの参照（id のみを保持）"""

    category_id: UUID


Category: TypeAlias = BuiltinCategory | CustomCategoryRef


@dataclass(frozen=True)
class CategoryDisplay:
    """解決済みのカテゴリ表示情報

    Attributes:
        name: 表示名
        icon: アイコン名
        color: 色名
        is_custom: カスタムカテゴリかどうか
    """

    name: str
    icon: str
    color: str
    is_custom: bool = False


def builtin_display(value: Enum) -> CategoryDisplay:
    """組み込み enum メンバーの表示情報を返す"""
    member: DisplayableCategory = value  # type: ignore[assignment]
    return CategoryDisplay(
        name=member.display_name,
        icon=member.icon,
        color=member.color,
    )


def resolve_category(
    category: Category,
    custom_categories: Mapping[UUID, CustomCategory],
    fallback: Enum,
) -> CategoryDisplay:
    """カテゴリを表示情報に解決する

    参照先のカスタムカテゴリが存在しない場合は fallback の組み込みカテゴリになる。

    Args:
        category: 解決するカテゴリ
        custom_categories: id をキーにしたカスタムカテゴリ
        fallback: 参照切れの場合に使う組み込みカテゴリ

    Returns:
        CategoryDisplay
    """
    if isinstance(category, CustomCategoryRef):
        custom = custom_categories.get(category.category_id)
        if custom is None:
            return builtin_display(fallback)
        return CategoryDisplay(
            name=custom.name,
            icon=custom.icon,
            color=custom.color,
            is_custom=True,
        )
    return builtin_display(category.value)


def references(category: Category, category_id: UUID) -> bool:
    """カテゴリが指定のカスタムカテゴリを参照しているか"""
    return (
        isinstance(category, CustomCategoryRef) and category.category_id == category_id
    )
