import numpy as np
from headposekit.geometry.intersect import intersection

def test_crossing_diagonals():
    p, ok = intersection((0,0), (2,2), (0,2), (2,0))
    assert ok and np.allclose(p, [1,1])

def test_intersection_outside_segments():
    # infinite lines, not segments
    p, ok = intersection((0,0), (1,0), (3,-1), (3,1))
    assert ok and np.allclose(p, [3,0])

def test_parallel_lines_fail():
    p, ok = intersection((0,0), (1,0), (0,1), (1,1))
    assert not ok and p is None
