from __future__ import annotations

from truthscore.models.types import Article, Claim

ARTICLE_EXCERPT_CHARS = 1000
ORIGINAL_CONTENT_CHARS = 2000

API_KEY_CHECK_PROMPT = 'Say "API key is working" if you can read this.'


def build_claim_extraction_prompt(content: str) -> str:
    return f"""
Analyze the following text and extract verifiable claims. Focus on factual statements that can be fact-checked.

Text: "{content}"

For each claim, provide:
1. The exact claim text
2. Type (factual, opinion, prediction, or statistic)
3. Confidence level (0-100) that this is a verifiable claim
4. Context if needed

Return the result as a JSON array with this structure:
[
  {{
    "id": "claim_1",
    "text": "exact claim text",
    "type": "factual|opinion|prediction|statistic",
    "confidence": 85,
    "context": "optional context"
  }}
]

Focus on:
- Specific facts, numbers, dates, names, locations
- Verifiable events or statements
- Statistical claims
- Avoid subjective opinions unless they're newsworthy claims

Limit to maximum 8 most important claims.
""".strip()


def _article_excerpt(article: Article) -> str:
    body = f"{article.description or ''} {article.content or ''}".strip()
    text = f"Source: {article.source_name}\nTitle: {article.title}\nContent: {body}"
    return text[:ARTICLE_EXCERPT_CHARS]


def build_verification_prompt(
    claims: list[Claim], articles: list[Article], original_content: str
) -> str:
    claims_text = "\n".join(
        f"Claim {claim.id}: {claim.text} (Type: {claim.type}, Confidence: {claim.confidence:g}%)"
        for claim in claims
    )
    sources_text = "\n\n".join(_article_excerpt(article) for article in articles)

    return f"""
You are a fact-checking expert. Analyze the user's content against multiple news sources to determine if it contains misinformation.

USER CONTENT CLAIMS:
{claims_text}

ORIGINAL USER CONTENT:
"{original_content[:ORIGINAL_CONTENT_CHARS]}"

VERIFIED NEWS SOURCES:
{sources_text}

Provide a comprehensive fact-check analysis and return ONLY a valid JSON object with this exact structure:
{{
  "truthScore": 75,
  "reasons": [
    "Main facts are corroborated by multiple reliable sources",
    "Timeline matches verified reporting",
    "No contradictory evidence found"
  ],
  "supportingArticles": 3,
  "contradictingArticles": 0,
  "verificationSummary": "The content aligns well with verified news reports from reliable sources.",
  "sources": [
    {{
      "name": "BBC",
      "url": "https://www.bbc.com/news/example",
      "reliability": 95,
      "stance": "supports"
    }}
  ]
}}

Scoring criteria:
- 90-100: Fully verified and accurate
- 80-89: Mostly accurate with minor issues
- 70-79: Generally accurate but some concerns
- 60-69: Mixed accuracy, significant concerns
- 50-59: Likely contains misinformation
- 0-49: High probability of misinformation

Factors to consider:
- Source credibility and bias
- Factual accuracy of specific claims
- Timeline consistency
- Missing context or misleading framing
- Emotional manipulation tactics
- Conspiracy theories or unsubstantiated claims
""".strip()
