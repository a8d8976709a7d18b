import logging
from collections import defaultdict, namedtuple
from concurrent.futures import ThreadPoolExecutor

from tqdm import tqdm

DEFAULT_DAMPING = 0.85
DEFAULT_ITERATIONS = 50

RankResult = namedtuple('RankResult', ['url', 'rank'])


def link_tables(edges):
    """Split (source, target) pairs into a backlink map and an outlink count table.

    Repeated edges and self-loops are kept, so they count once per occurrence.
    """
    backlinks = defaultdict(list)
    outlinks_count = defaultdict(int)
    for u, v in edges:
        backlinks[v].append(u)
        outlinks_count[u] += 1
    return dict(backlinks), dict(outlinks_count)


class PageRanker:
    """Fixed-count PageRank power iteration over a backlink map.

    Configure with the chained setters, then call :meth:`calculate`::

        ranker = PageRanker().set_damping(0.85).set_iterations(50)
        results = ranker.calculate(backlinks, outlinks_count)

    Setters ignore invalid values and keep the previous one.
    """

    def __init__(self, damping=DEFAULT_DAMPING, iterations=DEFAULT_ITERATIONS,
                 tolerance=None, workers=1):
        self.damping = DEFAULT_DAMPING
        self.iterations = DEFAULT_ITERATIONS
        self.tolerance = None
        self.workers = 1
        self.last_rounds = 0

        self.set_damping(damping)
        self.set_iterations(iterations)
        if tolerance is not None:
            self.set_tolerance(tolerance)
        self.set_workers(workers)

    def __repr__(self):
        return (f"PageRanker(damping={self.damping}, iterations={self.iterations}, "
                f"tolerance={self.tolerance}, workers={self.workers})")

    def set_damping(self, damping):
        if not _is_number(damping) or not 0 < damping < 1:
            logging.warning(f"[CONFIG] Ignoring damping {damping!r}; keeping {self.damping}")
            return self
        self.damping = float(damping)
        return self

    def set_iterations(self, iterations):
        if not _is_int(iterations) or iterations <= 0:
            logging.warning(f"[CONFIG] Ignoring iterations {iterations!r}; keeping {self.iterations}")
            return self
        self.iterations = iterations
        return self

    def set_tolerance(self, tolerance):
        """Enable early exit once the L1 change of a round drops below ``tolerance``.

        ``None`` switches back to running exactly ``iterations`` rounds.
        """
        if tolerance is None:
            self.tolerance = None
            return self
        if not _is_number(tolerance) or tolerance <= 0:
            logging.warning(f"[CONFIG] Ignoring tolerance {tolerance!r}; keeping {self.tolerance}")
            return self
        self.tolerance = float(tolerance)
        return self

    def set_workers(self, workers):
        if not _is_int(workers) or workers < 1:
            logging.warning(f"[CONFIG] Ignoring workers {workers!r}; keeping {self.workers}")
            return self
        self.workers = workers
        return self

    def calculate(self, backlinks, outlinks_count, progress=False):
        """Rank every node reachable from either input table.

        Returns a list of ``RankResult(url, rank)`` sorted by rank descending,
        ties broken by url ascending. The number of rounds actually run is
        left in ``self.last_rounds``.
        """
        damping, iterations = self.damping, self.iterations
        tolerance, workers = self.tolerance, self.workers

        urls = _universe(backlinks, outlinks_count)
        if not urls:
            self.last_rounds = 0
            return []

        N = len(urls)
        teleport = (1 - damping) / N
        rank = {u: 1 / N for u in urls}

        # Sources with a missing or non-positive count are treated as having one outlink
        weights = {}
        for u in urls:
            count = outlinks_count.get(u, 0)
            weights[u] = count if count > 0 else 1

        rounds = range(iterations)
        if progress:
            rounds = tqdm(rounds, desc="PageRank rounds")

        pool = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None
        slices = _split(urls, workers) if pool else [urls]
        done = 0
        try:
            for _ in rounds:
                if pool:
                    parts = [pool.submit(_update_slice, part, rank, backlinks, weights, damping, teleport)
                             for part in slices]
                    new_rank = {}
                    for future in parts:
                        new_rank.update(future.result())
                else:
                    new_rank = _update_slice(urls, rank, backlinks, weights, damping, teleport)

                delta = sum(abs(new_rank[u] - rank[u]) for u in urls) if tolerance else None
                rank = new_rank
                done += 1

                if delta is not None and delta < tolerance:
                    logging.info(f"[PAGERANK] Converged after {done} rounds (delta {delta:.3e}).")
                    break
        finally:
            if pool:
                pool.shutdown(wait=True)
            if progress:
                rounds.close()

        self.last_rounds = done
        logging.info(f"[PAGERANK] Ranked {N} URLs in {done} rounds.")
        return sort_results(rank)


def sort_results(rank):
    results = [RankResult(u, r) for u, r in rank.items()]
    results.sort(key=lambda x: x.url)
    results.sort(key=lambda x: x.rank, reverse=True)
    return results


def build_pagerank(edges, damping=DEFAULT_DAMPING, iterations=DEFAULT_ITERATIONS):
    backlinks, outlinks_count = link_tables(edges)
    results = PageRanker(damping=damping, iterations=iterations).calculate(backlinks, outlinks_count)

    logging.info(f"[PAGERANK] PageRank computed with {len(results)} URLs and {len(edges)} edges.")

    return dict(results)


def _update_slice(urls, rank, backlinks, weights, damping, teleport):
    # Reads only the previous round's vector; writes only the returned dict
    new_rank = {}
    for u in urls:
        incoming = 0.0
        for v in backlinks.get(u, ()):
            if v in rank:
                incoming += rank[v] / weights.get(v, 1)
        new_rank[u] = teleport + damping * incoming
    return new_rank


def _universe(backlinks, outlinks_count):
    urls = set(backlinks)
    for sources in backlinks.values():
        urls.update(sources)
    urls.update(outlinks_count)
    return sorted(urls)


def _split(urls, parts):
    size = -(-len(urls) // parts)
    return [urls[i:i + size] for i in range(0, len(urls), size)]


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)
