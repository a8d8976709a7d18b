# precompute.py
import argparse
import json
import logging
import pickle

from pageranker import DEFAULT_DAMPING, DEFAULT_ITERATIONS, PageRanker, link_tables

GRAPH_FILE = 'url_graph.json'
TOP_K = 10
CONVERGENCE_STEPS = (1, 5, 10, 50)

# Four pages, written as backlinks: page-a is linked from page-b and page-c, ...
DEMO_BACKLINKS = {
    'page-a': ['page-b', 'page-c'],
    'page-b': ['page-c'],
    'page-c': ['page-a', 'page-d'],
    'page-d': ['page-b', 'page-c', 'page-a'],
}
DEMO_OUTLINKS_COUNT = {
    'page-a': 2,
    'page-b': 1,
    'page-c': 2,
    'page-d': 1,
}


def load_graph(file=GRAPH_FILE):
    with open(file, encoding='utf-8') as f:
        data = json.load(f)
    edges = []
    if isinstance(data, dict):
        for u, vs in data.items():
            if not isinstance(vs, list):
                raise ValueError(f"Invalid graph format: outlinks of {u!r} are not a list")
            for v in vs:
                edges.append((u, v))
    elif isinstance(data, list):
        for edge in data:
            if not isinstance(edge, list) or len(edge) != 2:
                raise ValueError(f"Invalid graph format: {edge!r} is not a [source, target] pair")
            edges.append(tuple(edge))
    else:
        raise ValueError("Invalid graph format")

    # URLs are strings; anything else cannot be ranked or ordered alongside them
    for edge in edges:
        if not all(isinstance(url, str) for url in edge):
            raise ValueError(f"Invalid graph format: {list(edge)!r} holds a non-string URL")
    logging.info(f"[GRAPH] Loaded {len(edges)} edges from {file}")
    return edges


def print_results(results, limit=TOP_K):
    print(f"Top {limit} PageRank Results:")
    print("=" + "=".rjust(50))
    for url, rank in results[:limit]:
        print(f"{str(url):<40} | {rank:.8f}")


def convergence_report(backlinks, outlinks_count, steps=CONVERGENCE_STEPS):
    report = []
    for iterations in steps:
        results = PageRanker(iterations=iterations).calculate(backlinks, outlinks_count)
        if results:
            report.append((iterations, results[0].url, results[0].rank))
    return report


def save_pickle(obj, path):
    with open(path, 'wb') as f:
        pickle.dump(obj, f)


def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compute PageRank over a crawled link graph.")
    parser.add_argument('graph', nargs='?', default=GRAPH_FILE,
                        help=f"link graph JSON, adjacency object or edge list (default: {GRAPH_FILE})")
    parser.add_argument('--demo', action='store_true', help="rank the built-in four-page example")
    parser.add_argument('--damping', type=float, default=DEFAULT_DAMPING)
    parser.add_argument('--iterations', type=int, default=DEFAULT_ITERATIONS)
    parser.add_argument('--tolerance', type=float, default=None,
                        help="stop early once a round changes ranks by less than this (L1)")
    parser.add_argument('--workers', type=int, default=1)
    parser.add_argument('--top', type=positive_int, default=TOP_K)
    parser.add_argument('--output', help="pickle {url: rank} to this path")
    parser.add_argument('--progress', action='store_true')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')

    if args.demo:
        backlinks, outlinks_count = DEMO_BACKLINKS, DEMO_OUTLINKS_COUNT
    else:
        try:
            backlinks, outlinks_count = link_tables(load_graph(args.graph))
        except (OSError, ValueError) as e:
            logging.error(f"[GRAPH] Could not load graph {args.graph}: {e}")
            return 1

    ranker = (PageRanker()
              .set_damping(args.damping)
              .set_iterations(args.iterations)
              .set_tolerance(args.tolerance)
              .set_workers(args.workers))
    results = ranker.calculate(backlinks, outlinks_count, progress=args.progress)

    print(f"Total URLs processed: {len(results)}\n")
    print_results(results, args.top)

    print("\nPageRank convergence demonstration:")
    for iterations, url, rank in convergence_report(backlinks, outlinks_count):
        print(f"After {iterations:2d} iterations - Top page: {url} ({rank:.6f})")

    if args.output:
        try:
            save_pickle({url: rank for url, rank in results}, args.output)
        except OSError as e:
            logging.error(f"[RESULT] Could not save ranks to {args.output}: {e}")
            return 1
        logging.info(f"[RESULT] Saved {len(results)} ranks to {args.output}")

    return 0


if __name__ == '__main__':
    raise SystemExit(main())
