import numpy as np, pytest
from headposekit.face.model3d import Feature, CORRESPONDENCES, MODEL_POINTS, SKELETON, image_points

def test_scheme_indices():
    assert (Feature.SELLION, Feature.NOSE, Feature.MENTON) == (27, 30, 8)
    assert (Feature.RIGHT_EYE, Feature.LEFT_EYE) == (36, 45)
    assert (Feature.RIGHT_SIDE, Feature.LEFT_SIDE) == (0, 16)
    assert (Feature.MOUTH_CENTER_TOP, Feature.MOUTH_CENTER_BOTTOM) == (62, 66)

def test_every_feature_feeds_a_correspondence():
    used = {f for _, _, feats in CORRESPONDENCES for f in feats}
    assert used == set(Feature)

def test_eight_correspondences():
    assert len(CORRESPONDENCES) == 8 and MODEL_POINTS.shape == (8,3)
    assert [n for n,_,_ in CORRESPONDENCES][0] == "sellion"
    assert np.allclose(MODEL_POINTS[0], 0)

def test_stomion_is_lip_midpoint():
    pts = np.arange(136, dtype=float).reshape(68,2)
    obs = image_points(pts)
    assert obs.shape == (8,2)
    assert np.allclose(obs[0], pts[27])
    assert np.allclose(obs[7], (pts[62] + pts[66]) / 2)

def test_requires_full_landmark_set():
    with pytest.raises(ValueError):
        image_points(np.zeros((67,2)))

def test_skeleton_covers_all_points():
    covered = set()
    for first, last, _ in SKELETON: covered.update(range(first, last+1))
    assert covered == set(range(68))
