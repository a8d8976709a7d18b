import pytest


@pytest.fixture
def demo_graph():
    backlinks = {
        'page-a': ['page-b', 'page-c'],
        'page-b': ['page-c'],
        'page-c': ['page-a', 'page-d'],
        'page-d': ['page-b', 'page-c', 'page-a'],
    }
    outlinks_count = {'page-a': 2, 'page-b': 1, 'page-c': 2, 'page-d': 1}
    return backlinks, outlinks_count


@pytest.fixture
def consistent_graph():
    # a -> b, a -> c, b -> c, c -> a; every count matches the real outgoing edges
    backlinks = {'a': ['c'], 'b': ['a'], 'c': ['a', 'b']}
    outlinks_count = {'a': 2, 'b': 1, 'c': 1}
    return backlinks, outlinks_count


@pytest.fixture
def two_node_graph():
    # a -> a, a -> b, b -> a
    backlinks = {'a': ['a', 'b'], 'b': ['a']}
    outlinks_count = {'a': 2, 'b': 1}
    return backlinks, outlinks_count
