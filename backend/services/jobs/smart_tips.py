"""Detect hidden application keywords and anti-bot instructions in job postings.

Some employers ask applicants to mention a code word to prove they read the
whole posting. These helpers surface such words with the sentence around
them so the applicant does not miss them.
"""

import re

from bs4 import BeautifulSoup

from models.jobs import SmartTip

KEYWORD_PATTERNS = [
    re.compile(r"(?:please\s+)?mention(?:\s+the\s+word)?\s+\*{0,2}([A-Z0-9_]+)\*{0,2}", re.I),
    re.compile(r"tag\s+([A-Za-z0-9=+/]+)\s+when\s+applying", re.I),
    re.compile(r"include(?:\s+the\s+word)?\s+[\"'*]{0,2}([A-Z0-9_]+)[\"'*]{0,2}\s+(?:in|when|to)", re.I),
    re.compile(r"(?:please\s+)?(?:say|write|type)\s+[\"'*]{0,2}([A-Z0-9_]+)[\"'*]{0,2}", re.I),
    re.compile(r"(?:code\s*word|secret\s*word|keyword|magic\s*word)[:\s]+[\"'*]{0,2}([A-Z0-9_]+)[\"'*]{0,2}", re.I),
    re.compile(
        r"(?:start|begin)\s+(?:your\s+)?(?:application|email|message)\s+with\s+[\"'*]{0,2}([A-Z0-9_]+)[\"'*]{0,2}",
        re.I,
    ),
    re.compile(r"#([A-Za-z0-9=+/]{10,})"),
    re.compile(r"(?:tag|include|mention)\s+([A-Za-z0-9=+/]{15,})", re.I),
]

BOT_FILTER_PHRASES = [
    "spam applicant",
    "human applicant",
    "read the job",
    "read this post",
    "show you're human",
    "show you are human",
    "prove you read",
    "beta feature",
    "filter bot",
    "avoid spam",
    "actually read",
    "carefully read",
    "attention to detail",
    "read the entire",
    "read the full",
    "read the complete",
]

COMMON_WORDS = {
    "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "CAN", "HER", "WAS",
    "ONE", "OUR", "OUT", "HAS", "HIS", "HOW", "ITS", "MAY", "NOW", "OLD", "SEE",
    "TIME", "VERY", "WHEN", "WHO", "DID", "GET", "COM", "MADE", "FIND",
    "LONG", "DOWN", "DAY", "HAD", "SHE", "WILL", "YOUR", "FROM", "THEY", "BEEN",
    "HAVE", "WITH", "THIS", "THAT", "WHAT", "WERE", "SAID", "EACH", "WHICH",
    "THEIR", "ABOUT", "WOULD", "THERE", "OTHER", "COULD", "AFTER", "FIRST",
    "CODE", "JAVA", "DATA", "TEAM", "WORK", "ROLE", "TECH", "TYPE", "USER",
    "TEST", "FULL", "PART", "PLUS", "MORE", "YEAR", "MUST", "NEED",
}

_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]+=*$")
_LONG_TOKEN_RE = re.compile(r"[A-Za-z0-9+/=]{20,}")
_CONTEXT_RADIUS = 150


def plain_text(description: str) -> str:
    return " ".join(BeautifulSoup(description, "html.parser").get_text(" ").split())


def has_bot_filter_context(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in BOT_FILTER_PHRASES)


def looks_like_base64(value: str) -> bool:
    return len(value) >= 15 and bool(_BASE64_RE.match(value))


def looks_like_code(value: str) -> bool:
    """All caps, mixed letters and digits, or base64-shaped."""
    if len(value) >= 3 and value.isupper() and value.isalpha():
        return True
    if re.search(r"[A-Za-z]", value) and re.search(r"\d", value):
        return True
    return looks_like_base64(value)


def extract_context(text: str, keyword: str, radius: int = _CONTEXT_RADIUS) -> str:
    index = text.find(keyword)
    if index == -1:
        index = text.lower().find(keyword.lower())
    if index == -1:
        return ""
    start = max(0, index - radius)
    end = min(len(text), index + len(keyword) + radius)
    return text[start:end].strip()


def detect_smart_tips(description: str) -> list[SmartTip]:
    if not description or not description.strip():
        return []

    text = plain_text(description)
    bot_filter = has_bot_filter_context(text)

    keywords: list[str] = []
    for pattern in KEYWORD_PATTERNS:
        for match in pattern.finditer(text):
            keyword = match.group(1)
            if keyword and len(keyword) >= 3 and keyword.upper() not in COMMON_WORDS and keyword not in keywords:
                keywords.append(keyword)

    tips: list[SmartTip] = []
    for keyword in keywords:
        if bot_filter:
            tips.append(SmartTip(
                type="hidden_keyword",
                keyword=keyword,
                context=extract_context(text, keyword),
                instruction=f'Include "{keyword}" in your application to show you read the job posting',
                is_bot_filter=True,
            ))
        elif looks_like_code(keyword):
            tips.append(SmartTip(
                type="possible_keyword",
                keyword=keyword,
                context=extract_context(text, keyword),
                instruction=f'This might be a keyword to include in your application: "{keyword}"',
            ))

    for token in _LONG_TOKEN_RE.findall(text):
        if token in keywords or not looks_like_base64(token):
            continue
        context = extract_context(text, token)
        lowered = context.lower()
        if "tag" in lowered or "include" in lowered or "mention" in lowered:
            tips.append(SmartTip(
                type="tracking_code",
                keyword=token,
                context=context,
                instruction=f'Include this code in your application: "{token}"',
                is_bot_filter=bot_filter,
            ))
    return tips
