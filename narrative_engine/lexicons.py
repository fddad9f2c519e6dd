"""Rule tables driving the narrative analyzers.

Every lexicon the engine matches against lives here as plain data so that
callers can enumerate categories, test them one by one, or swap in tables for
another locale. Nothing in this module performs matching itself.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class QuoteConvention:
    """A pair of quotation glyphs that delimit a dialogue span."""
    name: str
    open_quote: str
    close_quote: str


@dataclass(frozen=True)
class ConflictCategory:
    name: str
    keywords: Tuple[str, ...]
    base_intensity: int
    description: str


@dataclass(frozen=True)
class ForeshadowingCategory:
    name: str
    setup_keywords: Tuple[str, ...]
    payoff_keywords: Tuple[str, ...]


# Quotation conventions, scanned independently in this order
QUOTE_CONVENTIONS: Tuple[QuoteConvention, ...] = (
    QuoteConvention("double_quotes", "“", "”"),        # “…”
    QuoteConvention("single_quotes", "‘", "’"),        # ‘…’
    QuoteConvention("corner_quotes", "「", "」"),
    QuoteConvention("double_corner_quotes", "『", "』"),
    QuoteConvention("straight_quotes", '"', '"'),
)

OPEN_QUOTE_CHARS = "".join(sorted({c.open_quote for c in QUOTE_CONVENTIONS}))
CLOSE_QUOTE_CHARS = "".join(sorted({c.close_quote for c in QUOTE_CONVENTIONS}))
QUOTE_CHARS = "".join(sorted(set(OPEN_QUOTE_CHARS + CLOSE_QUOTE_CHARS)))

# Speaking verbs used by the attribution templates
SPEAKING_VERBS: Tuple[str, ...] = (
    '說', '道', '講', '問', '答', '回', '叫', '喊', '嘆', '驚', '笑', '哭', '罵', '吼',
    '念', '唸', '讀', '吟', '誦', '低語', '細語',
)

# Words containing a speaking verb that do not introduce speech (知道 is not 道)
NON_SPEAKING_COMPOUNDS: Tuple[str, ...] = ('知道', '道路', '味道', '道理', '難道')

# Particles stripped from a subject phrase before it is treated as a name
SPEAKER_PARTICLES = '的地得這那此一個位名'

PERSONAL_PRONOUNS: Tuple[str, ...] = (
    '我', '你', '他', '她', '它', '您', '咱', '我們', '你們', '他們', '她們', '它們',
)

# Single-character pronouns whose presence raises dialogue confidence
DIALOGUE_PRONOUN_CHARS = '你我他她它您'

# Punctuation whose presence inside a quote raises dialogue confidence
DIALOGUE_PUNCTUATION_CHARS = '。！？，'

SENTENCE_TERMINATORS = '。！？'

INFERRED_ATTRIBUTION = 'inferred'

ACTION_VERBS: Tuple[str, ...] = (
    '跑', '衝', '撞', '躍', '跳', '飛', '擊', '打', '踢', '推', '拉', '抓', '投',
)

CONFLICT_CATEGORIES: Tuple[ConflictCategory, ...] = (
    ConflictCategory(
        'internal',
        ('掙扎', '猶豫', '矛盾', '困惑', '迷茫', '痛苦', '煎熬', '糾結', '抉擇', '衝突'),
        6,
        '檢測到內心衝突',
    ),
    ConflictCategory(
        'external',
        ('戰鬥', '攻擊', '威脅', '危險', '敵人', '對抗', '競爭', '挑戰', '阻礙', '障礙'),
        8,
        '檢測到外部衝突',
    ),
    ConflictCategory(
        'interpersonal',
        ('爭吵', '分歧', '誤解', '背叛', '欺騙', '嫉妒', '憤怒', '失望', '傷害', '報復'),
        7,
        '檢測到人際衝突',
    ),
    ConflictCategory(
        'societal',
        ('革命', '抗議', '壓迫', '不公', '制度', '權力', '階級', '歧視', '偏見', '體制'),
        9,
        '檢測到社會衝突',
    ),
)

FORESHADOWING_CATEGORIES: Tuple[ForeshadowingCategory, ...] = (
    ForeshadowingCategory(
        'character',
        ('神秘', '隱藏', '秘密', '過去', '身份', '來歷不明'),
        ('原來', '真相', '揭露', '發現', '事實上', '實際上'),
    ),
    ForeshadowingCategory(
        'plot',
        ('預言', '預兆', '暗示', '線索', '徵象', '前兆'),
        ('應驗', '實現', '成真', '證實', '果然', '如所料'),
    ),
    ForeshadowingCategory(
        'theme',
        ('象徵', '寓意', '隱喻', '暗喻', '比喻'),
        ('體現', '表達', '揭示', '展現', '闡述'),
    ),
    ForeshadowingCategory(
        'object',
        ('重要', '特殊', '古老', '神奇', '珍貴'),
        ('發揮', '使用', '關鍵', '救命', '決定性'),
    ),
)

SETUP_INTENSITY_WEIGHT = 3
PAYOFF_IMPACT_WEIGHT = 4
CONNECTION_STRENGTH_WEIGHT = 3

# Recommendation texts
PACE_SLOW_RECOMMENDATIONS: Tuple[str, ...] = (
    '考慮增加對話或動作場景來提升節奏',
    '縮短句子長度可以增加緊張感',
)
PACE_FAST_RECOMMENDATIONS: Tuple[str, ...] = (
    '可以添加一些描述性段落來讓讀者喘息',
    '適當的停頓能增強戲劇效果',
)
ADD_CONFLICT_RECOMMENDATION = '考慮添加更多衝突來增強戲劇張力'
ORPHANED_SETUP_RECOMMENDATION = '發現 {count} 個未回收的伏筆，建議安排回收'
INSUFFICIENT_CONTENT_RECOMMENDATION = '內容不足，無法進行詳細分析'

# Plot improvement suggestions: type -> title/description/suggestion/impact
PLOT_SUGGESTION_TEMPLATES: Dict[str, Dict[str, str]] = {
    'no_conflict': {
        'type': 'conflict',
        'priority': 'high',
        'title': '缺乏戲劇衝突',
        'description': '故事中未檢測到明顯的衝突點',
        'suggestion': '建議增加角色間的對立、內心掙扎或外部威脅來增強戲劇張力',
        'impact': '高度提升讀者參與度和故事吸引力',
    },
    'sparse_conflict': {
        'type': 'conflict',
        'priority': 'medium',
        'title': '衝突密度偏低',
        'description': '檢測到的衝突點較少，可能影響故事節奏',
        'suggestion': '考慮在關鍵情節點添加更多衝突元素',
        'impact': '提升故事的緊張感和戲劇效果',
    },
    'slow_pace': {
        'type': 'pace',
        'priority': 'high',
        'title': '敘事節奏緩慢',
        'description': '故事節奏偏慢，可能影響讀者閱讀體驗',
        'suggestion': '增加對話、動作場景或縮短句子長度來提升節奏',
        'impact': '改善讀者的閱讀流暢度和參與感',
    },
    'fast_pace': {
        'type': 'pace',
        'priority': 'medium',
        'title': '節奏過於急促',
        'description': '故事節奏過快，讀者可能需要更多停頓',
        'suggestion': '適當添加描述性段落或內心獨白來調節節奏',
        'impact': '提供更好的閱讀體驗和情感沈澱',
    },
    'orphaned_setups': {
        'type': 'foreshadowing',
        'priority': 'medium',
        'title': '未回收的伏筆',
        'description': '發現 {count} 個未回收的伏筆設置',
        'suggestion': '建議在後續章節中安排伏筆的回收和解答',
        'impact': '提升故事的完整性和讀者滿足感',
    },
    'low_overall': {
        'type': 'overall',
        'priority': 'high',
        'title': '整體劇情品質需提升',
        'description': '劇情整體評分為 {score}/10，低於平均水準',
        'suggestion': '建議重點關注衝突設計、節奏控制和伏筆運用',
        'impact': '全面提升作品的文學品質和商業價值',
    },
}

SUGGESTION_PRIORITY_ORDER = {'high': 3, 'medium': 2, 'low': 1}

# Sentiment lexicon
POSITIVE_WORDS: Tuple[str, ...] = ('喜歡', '愛', '開心', '快樂', '美好', '優秀', '成功', '幸福', '讚', '棒')
NEGATIVE_WORDS: Tuple[str, ...] = ('討厭', '恨', '難過', '悲傷', '失敗', '糟糕', '痛苦', '憤怒', '差', '爛')
SENTIMENT_DOMINANCE_RATIO = 1.5

SYNONYMS: Dict[str, Tuple[str, ...]] = {
    '說': ('講', '談', '述', '言', '道'),
    '看': ('望', '觀', '視', '瞧', '瞄'),
    '想': ('思', '念', '考慮', '思考', '尋思'),
    '走': ('行', '步', '邁', '移', '前進'),
    '好': ('佳', '優', '良', '善', '美'),
    '大': ('巨', '宏', '廣', '寬', '闊'),
}
