from __future__ import annotations
import numpy as np

EPS = 1e-8

def intersection(o1, p1, o2, p2):
    """
    Intersection of the infinite lines (o1,p1) and (o2,p2).
    Returns (point, True), or (None, False) when the lines are parallel.
    """
    o1 = np.asarray(o1, dtype=np.float64); p1 = np.asarray(p1, dtype=np.float64)
    o2 = np.asarray(o2, dtype=np.float64); p2 = np.asarray(p2, dtype=np.float64)
    x = o2 - o1
    d1 = p1 - o1
    d2 = p2 - o2
    cross = d1[0]*d2[1] - d1[1]*d2[0]
    if abs(cross) < EPS:
        return None, False
    t1 = (x[0]*d2[1] - x[1]*d2[0]) / cross
    return o1 + d1*t1, True
