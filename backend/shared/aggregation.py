"""
Sentiment aggregation for the insights dashboard
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Sequence

from .records import SentimentRecord

POSITIVE_THRESHOLD = 0.1
NEGATIVE_THRESHOLD = -0.1
TOP_KEYWORD_LIMIT = 10
DEFAULT_PLATFORM = 'reddit'


@dataclass
class KeywordStat:
    keyword: str
    frequency: int
    average_sentiment: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'keyword': self.keyword,
            'frequency': self.frequency,
            'averageSentiment': self.average_sentiment
        }


@dataclass
class SentimentSummary:
    total_posts: int
    average_sentiment: float
    positive_count: int
    negative_count: int
    neutral_count: int
    positive_percentage: str
    negative_percentage: str
    neutral_percentage: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalPosts': self.total_posts,
            'averageSentiment': self.average_sentiment,
            'positiveCount': self.positive_count,
            'negativeCount': self.negative_count,
            'neutralCount': self.neutral_count,
            'positivePercentage': self.positive_percentage,
            'negativePercentage': self.negative_percentage,
            'neutralPercentage': self.neutral_percentage
        }


@dataclass
class PlatformStat:
    platform: str
    post_count: int
    average_sentiment: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'platform': self.platform,
            'postCount': self.post_count,
            'averageSentiment': self.average_sentiment
        }


@dataclass
class DashboardResult:
    """Aggregated dashboard payload for one product"""
    sentiment: SentimentSummary
    top_keywords: List[KeywordStat]
    platform_breakdown: List[PlatformStat]
    trends: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sentiment': self.sentiment.to_dict(),
            'topKeywords': [stat.to_dict() for stat in self.top_keywords],
            'platformBreakdown': [stat.to_dict() for stat in self.platform_breakdown],
            'trends': list(self.trends)
        }


def format_percentage(count: int, total: int) -> str:
    """Share of ``total`` as a percentage string with one decimal place"""
    if total <= 0:
        return '0.0'
    # Decimal(float) keeps the exact binary value, so .x5 boundaries round up
    value = Decimal(count / total * 100)
    return str(value.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def summarize_sentiment(records: Sequence[SentimentRecord]) -> SentimentSummary:
    total_posts = len(records)
    average_sentiment = (
        sum(record.sentiment_score for record in records) / total_posts
        if total_posts > 0 else 0
    )

    positive_count = sum(1 for record in records if record.sentiment_score > POSITIVE_THRESHOLD)
    negative_count = sum(1 for record in records if record.sentiment_score < NEGATIVE_THRESHOLD)
    # Derived rather than counted so the three buckets always sum to the total
    neutral_count = total_posts - positive_count - negative_count

    return SentimentSummary(
        total_posts=total_posts,
        average_sentiment=average_sentiment,
        positive_count=positive_count,
        negative_count=negative_count,
        neutral_count=neutral_count,
        positive_percentage=format_percentage(positive_count, total_posts),
        negative_percentage=format_percentage(negative_count, total_posts),
        neutral_percentage=format_percentage(neutral_count, total_posts)
    )


def keyword_key(keyword: Any) -> str:
    """Text key for a keyword; JSON null and booleans keep their JSON spelling"""
    if isinstance(keyword, str):
        return keyword
    if keyword is None:
        return 'null'
    if isinstance(keyword, bool):
        return 'true' if keyword else 'false'
    return str(keyword)


def rank_keywords(records: Sequence[SentimentRecord],
                  limit: int = TOP_KEYWORD_LIMIT) -> List[KeywordStat]:
    """
    Count keyword occurrences and their mean sentiment.

    Keywords are ordered by frequency, highest first. Equal frequencies keep
    first-seen order, which callers should not rely on.
    """
    keyword_map: Dict[str, Dict[str, float]] = {}

    for record in records:
        if not record.keywords:
            continue
        for keyword in record.keywords:
            keyword = keyword_key(keyword)
            entry = keyword_map.setdefault(keyword, {'frequency': 0, 'total_sentiment': 0.0})
            entry['frequency'] += 1
            entry['total_sentiment'] += record.sentiment_score

    stats = [
        KeywordStat(
            keyword=keyword,
            frequency=int(entry['frequency']),
            average_sentiment=entry['total_sentiment'] / entry['frequency']
        )
        for keyword, entry in keyword_map.items()
    ]
    stats.sort(key=lambda stat: stat.frequency, reverse=True)
    return stats[:limit]


def aggregate_sentiment(records: Sequence[SentimentRecord]) -> DashboardResult:
    """Build the dashboard statistics for a product's sentiment records"""
    summary = summarize_sentiment(records)

    return DashboardResult(
        sentiment=summary,
        top_keywords=rank_keywords(records),
        platform_breakdown=[PlatformStat(
            platform=DEFAULT_PLATFORM,
            post_count=summary.total_posts,
            average_sentiment=summary.average_sentiment
        )],
        trends=[]
    )
