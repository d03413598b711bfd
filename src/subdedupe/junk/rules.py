"""Junk rule taxonomy.

Rules are immutable data evaluated in order; the first matching rule wins.
Three families exist:

- ``GENERIC_RULES``: applied to every title.
- ``BRACKET_RULES``: applied to titles in the aggregator's
  ``【location】category：name`` convention.
- ``MISSING_AMOUNT_RULES``: applied to non-bracket titles of records that
  carry no ``max_amount``; these are mostly category pages and programs
  whose amount semantics do not fit a subsidy.
"""

import re
from dataclasses import dataclass, field
from enum import StrEnum

__all__ = [
    "JunkCategory",
    "RuleKind",
    "JunkRule",
    "JunkRuleSet",
    "GENERIC_RULES",
    "BRACKET_RULES",
    "MISSING_AMOUNT_RULES",
    "DEFAULT_RULE_SET",
]


class JunkCategory(StrEnum):
    """Kind of non-subsidy content a rule detects."""

    NAVIGATION = "navigation"
    EVENT = "event"
    LOAN = "loan"
    ASSOCIATION = "association"
    CATEGORY_PAGE = "category_page"
    SUPPORT_INFO = "support_info"
    KEYWORD = "keyword"


class RuleKind(StrEnum):
    """How a rule pattern is matched against a title.

    Attributes
    ----------
    SUBSTRING : str
        Pattern occurs anywhere in the title.
    SUFFIX : str
        Title ends with the pattern.
    REGEX : str
        Regular expression searched anywhere in the title.
    """

    SUBSTRING = "substring"
    SUFFIX = "suffix"
    REGEX = "regex"


@dataclass(frozen=True)
class JunkRule:
    """A single junk pattern.

    Attributes
    ----------
    category : JunkCategory
        Content category the pattern detects.
    kind : RuleKind
        Matching mode.
    pattern : str
        Literal text or regular expression source.
    ignore_case : bool
        Case-insensitive matching (regex rules only).
    """

    category: JunkCategory
    kind: RuleKind
    pattern: str
    ignore_case: bool = False
    _compiled: re.Pattern[str] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Compile regex patterns once."""
        if not self.pattern:
            raise ValueError("Junk rule pattern must not be empty")
        if self.kind == RuleKind.REGEX:
            flags = re.IGNORECASE if self.ignore_case else 0
            object.__setattr__(self, "_compiled", re.compile(self.pattern, flags))

    @property
    def name(self) -> str:
        """Stable rule identifier used in audit events."""
        return f"{self.category.value}:{self.kind.value}:{self.pattern}"

    def matches(self, title: str) -> bool:
        """Check whether the rule matches a title."""
        if self._compiled is not None:
            return self._compiled.search(title) is not None
        if self.kind == RuleKind.SUFFIX:
            return title.endswith(self.pattern)
        return self.pattern in title


def _regex(category: JunkCategory, *patterns: str, ignore_case: bool = False) -> list[JunkRule]:
    return [JunkRule(category, RuleKind.REGEX, p, ignore_case=ignore_case) for p in patterns]


def _substring(category: JunkCategory, *patterns: str) -> list[JunkRule]:
    return [JunkRule(category, RuleKind.SUBSTRING, p) for p in patterns]


def _suffix(category: JunkCategory, *patterns: str) -> list[JunkRule]:
    return [JunkRule(category, RuleKind.SUFFIX, p) for p in patterns]


_C = JunkCategory

GENERIC_RULES: tuple[JunkRule, ...] = (
    *_regex(_C.NAVIGATION, r"あなたに合った", r"探しましょう", r"相談室", r"お知らせ$"),
    *_regex(_C.EVENT, r"募集のご案内$", r"説明会(?:のご案内)?$", r"イベント(?:のご案内)?$"),
    *_regex(_C.NAVIGATION, r"について$", r"のお願い$", r"ページ一覧", r"お役立ち情報"),
    *_regex(_C.LOAN, r"返済が負担"),
    *_regex(_C.CATEGORY_PAGE, r"支援施策$"),
    *_regex(_C.NAVIGATION, r"選定事業決定"),
    *_regex(_C.EVENT, r"特別相談"),
    *_regex(_C.NAVIGATION, r"審議会"),
    *_regex(_C.EVENT, r"キャラバン"),
    *_regex(
        _C.NAVIGATION,
        r"窓口案内",
        r"^ホーム$",
        r"^トップ$",
        r"FAQ",
        r"よくある質問",
        r"メールマガジン",
        r"お問い合わせ",
        r"アクセス",
        r"採用情報",
        r"職員募集",
        r"入札情報",
        r"入札公告",
        r"パブリックコメント",
    ),
    # Aggregator section prefixes that never denote a subsidy
    *_regex(_C.EVENT, r"^セミナー・イベント[：:]"),
    *_regex(_C.CATEGORY_PAGE, r"^相談窓口[：:]"),
    *_regex(_C.EVENT, r"^表彰[：:]", r"^展示会情報[：:]"),
    *_regex(
        _C.CATEGORY_PAGE,
        r"^支援情報[：:]",
        r"^認定制度[：:]",
        r"^専門家派遣[：:]",
        r"^情報提供[：:]",
        r"^人材募集[：:]",
        r"^施設入居[：:]",
    ),
    # Technical training courses
    *_regex(_C.EVENT, r"CAD", ignore_case=True),
    *_regex(
        _C.EVENT,
        r"PLC制御",
        r"溶接技術",
        r"マシニングセンタ",
        r"シーケンス制御",
        r"HDL.*回路",
        r"フォーラム",
    ),
)

BRACKET_RULES: tuple[JunkRule, ...] = (
    *_substring(_C.LOAN, "】融資・貸付：", "】融資・貸付 ："),
    *_substring(_C.SUPPORT_INFO, "】支援情報：", "】支援情報 ："),
    *_substring(_C.SUPPORT_INFO, "】募集：", "】専門家による支援：", "】イベント出展者募集："),
    *_substring(_C.KEYWORD, "利子補給", "融資制度", "信用保証料"),
)

MISSING_AMOUNT_RULES: tuple[JunkRule, ...] = (
    *_substring(
        _C.NAVIGATION,
        "問い合わせ",
        "お知らせ",
        "ニュース",
        "一覧",
        "トップ",
        "事業者向け",
        "パンフレット",
        "チラシ",
        "入札結果",
        "公表",
        "相談",
        "カテゴリ",
    ),
    *_substring(_C.EVENT, "創業塾"),
    *_substring(_C.NAVIGATION, "事業者の方", "人気の補助金", "創業、ベンチャー"),
    *_suffix(
        _C.CATEGORY_PAGE,
        "助成・補助金",
        "助成・給付金・融資",
        "中小企業支援・融資制度",
        "補助金・助成金・支援金",
        "補助事業・制度資金",
    ),
    *_substring(_C.NAVIGATION, "事業者等選定", "審査委員"),
    *_substring(_C.EVENT, "公募説明会"),
    *_substring(_C.LOAN, "中小企業総合振興資金"),
    *_substring(_C.ASSOCIATION, "事業者団体"),
    *_substring(_C.LOAN, "北海道の中小企業向け融資制度"),
    *_substring(_C.NAVIGATION, "コーディネーターの募集", "専門家向け公募"),
    *_suffix(_C.LOAN, "融資制度"),
    *_substring(_C.LOAN, "中小企業への融資制度"),
    *_suffix(_C.LOAN, "金融対策", "利子補給", "保証料補給"),
    *_substring(_C.NAVIGATION, "創業支援事業計画", "審査員", "相談窓口"),
    *_suffix(_C.EVENT, "説明会"),
    *_substring(_C.NAVIGATION, "企業化状況報告"),
    # Loans carry a lending limit rather than a subsidy amount
    *_substring(
        _C.LOAN,
        "】融資・貸付：",
        "融資あっせん",
        "近代化基金融資",
        "中小企業振興資金融資",
        "小規模企業融資",
        "制度融資",
    ),
    *_substring(_C.SUPPORT_INFO, "】支援情報：", "募集：「光の祭典", "募集：「トキの放鳥"),
    *_substring(_C.EVENT, "安全運転研修"),
    *_substring(_C.ASSOCIATION, "人材確保等支援助成"),
    *_substring(_C.EVENT, "適性診断活用講座", "高齢運転者安全教育"),
    *_substring(_C.ASSOCIATION, "安全装置等導入促進助成"),
    *_substring(
        _C.KEYWORD,
        "緊急対策として支援金を交付",
        "持続化補助金（共同・協業型）",
        "新事業進出補助金（第",
        "プロジェクションマッピング",
    ),
    *_substring(_C.LOAN, "振興資金融資", "特別融資利子"),
    *_substring(_C.EVENT, "イベント出展", "展示会", "EXPO"),
    *_substring(_C.LOAN, "山梨みらいファンド"),
    *_substring(_C.NAVIGATION, "認証制度"),
    *_substring(_C.KEYWORD, "スマート農業機器"),
    *_substring(_C.LOAN, "融資あっ旋", "融資制度", "振興資金"),
    *_substring(_C.SUPPORT_INFO, "サポートデスク"),
    *_substring(
        _C.EVENT,
        "セミナーを開催",
        "講座受講",
        "講習手数料",
        "安全教育訓練",
    ),
    *_substring(_C.ASSOCIATION, "受診料助成", "手数料助成", "検査助成"),
    *_substring(_C.LOAN, "応援ファンド", "みらいファンド"),
    *_substring(_C.SUPPORT_INFO, "専門家による支援"),
    *_substring(_C.EVENT, "ビジネスプラン募集", "出展者募集"),
    *_substring(_C.LOAN, "利子補給", "信用保証料", "保証料補給"),
    *_substring(_C.EVENT, "女性のための起業応援セミナー", "起業応援セミナーを開催"),
    *_substring(_C.LOAN, "中小企業者向け融資制度"),
    # Member-only benefits of a taxi operators' association
    *_substring(
        _C.ASSOCIATION,
        "テールゲートリフター導入促進助成",
        "ドライブレコーダー機器導入促進助成",
        "アルコール検知器導入促進助成",
        "血圧計導入促進助成",
        "初任運転者安全教育受講助成",
        "熱中症予防対策空調付き作業着等購入助成事業",
        "免許取得に係る助成",
        "環境マネジメントシステム認証取得促進助成",
        "エコタイヤ等導入促進助成",
        "環境対応車導入促進助成",
    ),
    *_substring(_C.CATEGORY_PAGE, "省エネ診断・省エネ・非化石転換補助金"),
)


@dataclass(frozen=True)
class JunkRuleSet:
    """The three rule families handed to a classifier.

    Attributes
    ----------
    generic : tuple[JunkRule, ...]
        Rules applied to every title.
    bracket : tuple[JunkRule, ...]
        Rules for location-bracket titles.
    missing_amount : tuple[JunkRule, ...]
        Rules for non-bracket titles of records without an amount.
    """

    generic: tuple[JunkRule, ...] = GENERIC_RULES
    bracket: tuple[JunkRule, ...] = BRACKET_RULES
    missing_amount: tuple[JunkRule, ...] = MISSING_AMOUNT_RULES


DEFAULT_RULE_SET = JunkRuleSet()
