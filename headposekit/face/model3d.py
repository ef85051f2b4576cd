from __future__ import annotations
from enum import IntEnum
import numpy as np

NUM_LANDMARKS = 68

class Feature(IntEnum):
    """Named indices into the 68-point (iBUG) landmark scheme."""
    RIGHT_SIDE = 0
    MENTON = 8
    LEFT_SIDE = 16
    SELLION = 27
    NOSE = 30
    RIGHT_EYE = 36
    LEFT_EYE = 45
    MOUTH_CENTER_TOP = 62
    MOUTH_CENTER_BOTTOM = 66

# Head-centric frame, millimeters: x out of the face, y to the subject's left, z up.
# Sellion is the origin.
P3D_SELLION   = (0.,     0.,     0.)
P3D_RIGHT_EYE = (-20.,  -65.5,  -5.)
P3D_LEFT_EYE  = (-20.,   65.5,  -5.)
P3D_RIGHT_EAR = (-100., -77.5,  -6.)
P3D_LEFT_EAR  = (-100.,  77.5,  -6.)
P3D_MENTON    = (0.,     0.,  -133.)
P3D_NOSE      = (21.,    0.,   -48.)
P3D_STOMION   = (10.,    0.,   -75.)

# (name, 3D point, landmarks averaged to get the 2D observation)
CORRESPONDENCES = [
    ("sellion",   P3D_SELLION,   (Feature.SELLION,)),
    ("right_eye", P3D_RIGHT_EYE, (Feature.RIGHT_EYE,)),
    ("left_eye",  P3D_LEFT_EYE,  (Feature.LEFT_EYE,)),
    ("right_ear", P3D_RIGHT_EAR, (Feature.RIGHT_SIDE,)),
    ("left_ear",  P3D_LEFT_EAR,  (Feature.LEFT_SIDE,)),
    ("menton",    P3D_MENTON,    (Feature.MENTON,)),
    ("nose",      P3D_NOSE,      (Feature.NOSE,)),
    ("stomion",   P3D_STOMION,   (Feature.MOUTH_CENTER_TOP, Feature.MOUTH_CENTER_BOTTOM)),
]

MODEL_POINTS = np.array([p for _, p, _ in CORRESPONDENCES], dtype=np.float64)

# (first, last, closed) index ranges of the feature outline
SKELETON = [
    (0, 16, False),   # jaw
    (17, 21, False),  # right brow
    (22, 26, False),  # left brow
    (27, 30, False),  # nose bridge
    (30, 35, True),   # nose base
    (36, 41, True),   # right eye
    (42, 47, True),   # left eye
    (48, 59, True),   # outer lips
    (60, 67, True),   # inner lips
]

def check_landmarks(landmarks) -> np.ndarray:
    pts = np.asarray(landmarks, dtype=np.float64)
    if pts.shape != (NUM_LANDMARKS, 2):
        raise ValueError(f"expected ({NUM_LANDMARKS}, 2) landmarks, got {pts.shape}")
    return pts

def image_points(landmarks) -> np.ndarray:
    """(68,2) landmarks -> (8,2) observations, in CORRESPONDENCES order."""
    pts = check_landmarks(landmarks)
    return np.array([pts[list(feats)].mean(axis=0) for _, _, feats in CORRESPONDENCES],
                    dtype=np.float64)
