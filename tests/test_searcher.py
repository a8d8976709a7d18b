import pytest

from pageranker import RankResult
from searcher import combine_scores, dedupe_key, normalize_scores


@pytest.mark.parametrize("url, expected", [
    ("HTTPS://Example.COM/docs/", "https://example.com/docs"),
    ("https://example.com/docs/index.html", "https://example.com/docs"),
    ("https://example.com/index.htm", "https://example.com/"),
    ("https://example.com", "https://example.com/"),
    ("https://example.com/a?b=2&a=1#frag", "https://example.com/a?a=1&b=2"),
    ("https://www.example.com:443/docs", "https://example.com/docs"),
    ("http://example.com:80/", "http://example.com/"),
    ("http://example.com:8080/", "http://example.com:8080/"),
])
def test_dedupe_key(url, expected):
    assert dedupe_key(url) == expected


def test_dedupe_key_ignores_malformed_port():
    assert dedupe_key("https://example.com:port/a") == "https://example.com/a"


def test_normalize_scores():
    assert normalize_scores({'a': 2.0, 'b': 4.0, 'c': 3.0}) == {'a': 0.0, 'b': 1.0, 'c': 0.5}


def test_normalize_scores_constant_and_empty():
    assert normalize_scores({'a': 0.3, 'b': 0.3}) == {'a': 1, 'b': 1}
    assert normalize_scores({}) == {}


def test_combine_scores_blends_relevance_and_pagerank():
    pagerank = {'https://x.com/a': 0.1, 'https://x.com/b': 0.6, 'https://x.com/c': 0.3}
    relevance = {'https://x.com/a': 10.0, 'https://x.com/b': 9.0, 'https://x.com/c': 0.0}

    res = combine_scores(pagerank, relevance, gamma=0.5)

    scores = dict(res)
    assert scores['https://x.com/a'] == pytest.approx(0.5 * 1.0 + 0.5 * 0.0)
    assert scores['https://x.com/b'] == pytest.approx(0.5 * 0.9 + 0.5 * 1.0)
    assert scores['https://x.com/c'] == pytest.approx(0.5 * 0.0 + 0.5 * 0.4)
    assert [url for url, _ in res] == ['https://x.com/b', 'https://x.com/a', 'https://x.com/c']


def test_combine_scores_accepts_rank_results():
    pagerank = [RankResult('https://x.com/b', 0.7), RankResult('https://x.com/a', 0.3)]
    res = combine_scores(pagerank, {'https://x.com/a': 1.0, 'https://x.com/b': 1.0}, gamma=0.15)
    assert res[0][0] == 'https://x.com/b'


def test_combine_scores_dedupes_and_limits():
    relevance = {
        'https://x.com/a': 3.0,
        'https://X.com/a/': 2.0,
        'https://x.com/b': 1.0,
        'https://x.com/c': 0.0,
    }
    res = combine_scores({}, relevance, gamma=0.0, K=2)
    assert [url for url, _ in res] == ['https://x.com/a', 'https://x.com/b']


def test_combine_scores_without_candidates():
    assert combine_scores({'https://x.com/a': 1.0}, {}) == []
