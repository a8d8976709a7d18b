import logging
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

DEFAULT_PORTS = {'http': 80, 'https': 443}
INDEX_PAGES = ('/index.html', '/index.htm', '/index.php')


def dedupe_key(url):
    """Key under which two result URLs count as the same page.

    Host case, a leading ``www.``, the scheme's default port, index pages,
    trailing slashes, query order and fragments are ignored.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = parts.hostname or ''
    if host.startswith('www.'):
        host = host[4:]
    try:
        port = parts.port
    except ValueError:
        port = None
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"

    path = parts.path or '/'
    for page in INDEX_PAGES:
        if path.endswith(page):
            path = path[:-len(page)] or '/'
            break
    if path != '/':
        path = path.rstrip('/') or '/'
    query = urlencode(sorted(parse_qsl(parts.query)))
    return urlunsplit((scheme, host, path, query, ''))


def normalize_scores(scores):
    if not scores:
        return {}
    vals = list(scores.values())
    min_val, max_val = min(vals), max(vals)
    if max_val == min_val:
        return {k: 1 for k in scores}
    return {k: (v - min_val) / (max_val - min_val) for k, v in scores.items()}


def combine_scores(pagerank, relevance, gamma=0.15, K=10):
    """Blend a relevance score with PageRank for the relevance candidates.

    ``pagerank`` is either a ``{url: rank}`` map or the list returned by
    ``PageRanker.calculate``. URLs without a rank score 0 on that side.
    Returns up to ``K`` ``(url, score)`` pairs, one per page (see ``dedupe_key``).
    """
    if not isinstance(pagerank, dict):
        pagerank = dict(pagerank)
    if not relevance:
        logging.warning("[RANKING] No relevance candidates to combine.")
        return []

    pr_scores = normalize_scores({url: pagerank.get(url, 0) for url in relevance})
    rel_scores = normalize_scores(relevance)
    logging.info(f"[PAGERANK] Applied to {len(pr_scores)} URLs.")

    final_scores = {
        url: (1 - gamma) * rel_scores[url] + gamma * pr_scores[url]
        for url in rel_scores
    }
    ranked = sorted(final_scores.items(), key=lambda x: (-x[1], x[0]))

    # --- Deduplicate Final Results by Page ---
    seen = set()
    res = []
    for url, score in ranked:
        norm = dedupe_key(url)
        if norm not in seen:
            seen.add(norm)
            res.append((url, score))
        if len(res) >= K:
            break

    logging.info(f"[RESULT] Top {len(res)} results computed.")
    return res
