"""Text extraction and tokenization over a CVDocument."""

import re

from nltk.stem import PorterStemmer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from models.cv import CVDocument

_stemmer = PorterStemmer()

# Bullet markers: standard + expanded unicode set
BULLET_MARKERS = frozenset("•-–—►▪✓*○◆⚫→▸▹◇■□●")

_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?;])\s+(?=[A-Z0-9])|\n+")
_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9.#+/-]*[a-z0-9#+]|[a-z0-9]")


def strip_bullet(line: str) -> str:
    stripped = line.strip()
    if stripped and stripped[0] in BULLET_MARKERS:
        stripped = stripped.lstrip("".join(BULLET_MARKERS) + " ").strip()
    return re.sub(r"^\d{1,2}[.)](?:\s+|$)", "", stripped)


def split_sentences(text: str) -> list[str]:
    """Split a free-text description into statements, dropping bullet glyphs."""
    if not text:
        return []
    parts = (strip_bullet(p) for p in _SENTENCE_SPLIT_RE.split(text))
    return [p for p in parts if p]


def cv_statements(cv: CVDocument) -> list[str]:
    """Achievement-bearing statements: experience and project bullets plus description sentences."""
    statements: list[str] = []
    for exp in cv.experience:
        statements.extend(strip_bullet(b) for b in exp.bullets if b.strip())
        statements.extend(split_sentences(exp.description))
    for project in cv.projects:
        statements.extend(split_sentences(project.description))
    return [s for s in statements if s]


def cv_text(cv: CVDocument) -> str:
    """Concatenate every free-text field the keyword heuristics look at."""
    parts: list[str] = [cv.personal_info.title, cv.summary]
    for exp in cv.experience:
        parts.extend([exp.title, exp.company, exp.description, *exp.bullets])
    for edu in cv.education:
        parts.extend([edu.degree, edu.field, edu.school, edu.honors])
    parts.extend(cv.skills.all())
    for cert in cv.certifications:
        parts.extend([cert.name, cert.issuer])
    for project in cv.projects:
        parts.extend([project.name, project.description, *project.technologies])
    return "\n".join(p for p in parts if p)


def normalize(text: str) -> str:
    """Lowercase and strip punctuation, keeping dots in terms like "node.js"."""
    text = re.sub(r"\.(\s|$)", " ", text.lower())
    return re.sub(r"[^a-z0-9.#+/ -]", " ", text)


def tokenize(text: str, drop_stopwords: bool = True) -> list[str]:
    tokens = _TOKEN_RE.findall(normalize(text))
    if drop_stopwords:
        tokens = [t for t in tokens if t not in ENGLISH_STOP_WORDS]
    return tokens


def stem(word: str) -> str:
    return " ".join(_stemmer.stem(w) for w in word.split())


def extract_terms(text: str) -> set[str]:
    """Unigrams, bigrams and trigrams over the raw (stop-words kept) token stream."""
    words = tokenize(text, drop_stopwords=False)
    terms: set[str] = {w for w in words if w not in ENGLISH_STOP_WORDS}
    for i in range(len(words) - 1):
        terms.add(f"{words[i]} {words[i + 1]}")
    for i in range(len(words) - 2):
        terms.add(f"{words[i]} {words[i + 1]} {words[i + 2]}")
    return terms


def leading_word(statement: str) -> str:
    match = re.match(r"\s*([A-Za-z][A-Za-z'-]*)", statement)
    return match.group(1).lower() if match else ""
