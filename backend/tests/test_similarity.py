from services.similarity import extract_tfidf_keywords, tfidf_cosine


def test_tfidf_cosine_identical():
    text = "Python developer with Django and PostgreSQL experience"
    assert tfidf_cosine(text, text) > 0.99


def test_tfidf_cosine_different():
    score = tfidf_cosine(
        "Python backend developer building REST APIs",
        "Pastry chef specializing in French desserts",
    )
    assert score < 0.1


def test_tfidf_cosine_related():
    score = tfidf_cosine(
        "Senior Python engineer with FastAPI and Docker",
        "We need a Python engineer who knows FastAPI",
    )
    assert 0.1 < score <= 1.0


def test_tfidf_cosine_empty():
    assert tfidf_cosine("", "Python") == 0.0
    assert tfidf_cosine("the and of", "a an the") == 0.0


def test_extract_tfidf_keywords():
    keywords = extract_tfidf_keywords(
        "Kubernetes Kubernetes Terraform AWS infrastructure automation", top_n=5
    )
    assert "kubernetes" in keywords
    assert len(keywords) <= 5


def test_extract_tfidf_keywords_stable():
    text = "React TypeScript GraphQL frontend engineer"
    assert extract_tfidf_keywords(text) == extract_tfidf_keywords(text)


def test_extract_tfidf_keywords_empty():
    assert extract_tfidf_keywords("") == []
