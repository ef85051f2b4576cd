from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
import numpy as np
import cv2
from rich.console import Console

from ..face.model3d import MODEL_POINTS, check_landmarks, image_points
from ..geometry.camera_model import CameraModel

_console = Console(stderr=True)

# Head about 1m away, roughly facing the camera. Seeding the solver here keeps
# it out of the mirror solution (head *behind* the camera).
DEFAULT_RVEC = (1.2, 1.2, -1.2)
DEFAULT_TVEC = (0., 0., 1000.)

class FaceIndexError(IndexError):
    pass

@dataclass(frozen=True, eq=False)
class Frame:
    """Landmarks of every face found in one image. Face indices are only valid against this frame."""
    landmarks: Tuple[np.ndarray, ...]
    image_size: Tuple[int, int]  # (width, height)
    boxes: Tuple[Tuple[float, float, float, float], ...] = field(default=())

    def __post_init__(self):
        lms = tuple(check_landmarks(l).copy() for l in self.landmarks)
        for l in lms: l.setflags(write=False)
        object.__setattr__(self, "landmarks", lms)
        object.__setattr__(self, "boxes", tuple(tuple(b) for b in self.boxes))
        if self.boxes and len(self.boxes) != len(lms):
            raise ValueError("boxes and landmarks must have the same length")

    def __len__(self):
        return len(self.landmarks)

    def face(self, idx: int) -> np.ndarray:
        if not 0 <= idx < len(self.landmarks):
            raise FaceIndexError(f"face index {idx} out of range for a frame with {len(self.landmarks)} face(s)")
        return self.landmarks[idx]

def pose_matrix(rvec, tvec_mm) -> np.ndarray:
    R,_ = cv2.Rodrigues(np.asarray(rvec, dtype=np.float64).reshape(3,1))
    T = np.eye(4)
    T[:3,:3] = R
    T[:3,3] = np.asarray(tvec_mm, dtype=np.float64).reshape(3) / 1000.0
    return T

def euler_angles(pose: np.ndarray, neutral_rvec: Sequence[float]=DEFAULT_RVEC):
    """(yaw, pitch, roll) in degrees of the head relative to the neutral facing-camera orientation."""
    N,_ = cv2.Rodrigues(np.asarray(neutral_rvec, dtype=np.float64).reshape(3,1))
    R = np.asarray(pose)[:3,:3] @ N.T
    sy = np.sqrt(R[0,0]**2 + R[1,0]**2)
    if sy >= 1e-6:
        pitch = np.degrees(np.arctan2(R[2,1], R[2,2]))
        yaw   = np.degrees(np.arctan2(-R[2,0], sy))
        roll  = np.degrees(np.arctan2(R[1,0], R[0,0]))
    else:
        pitch = np.degrees(np.arctan2(-R[1,2], R[1,1]))
        yaw   = np.degrees(np.arctan2(-R[2,0], sy))
        roll  = 0.0
    return float(yaw), float(pitch), float(roll)

class HeadPoseEstimator:
    def __init__(self, camera: CameraModel|float, landmarker: Optional[Callable]=None,
                 initial_rvec: Sequence[float]=DEFAULT_RVEC, initial_tvec: Sequence[float]=DEFAULT_TVEC,
                 verbose: bool=False):
        self.camera = camera if isinstance(camera, CameraModel) else CameraModel(focal=float(camera))
        self.landmarker = landmarker
        self.initial_rvec = np.asarray(initial_rvec, dtype=np.float64).reshape(3,1)
        self.initial_tvec = np.asarray(initial_tvec, dtype=np.float64).reshape(3,1)
        self.verbose = verbose

    def _ensure_center(self, width:int, height:int):
        if self.camera.ensure_center(width, height) and self.verbose:
            _console.log(f"Setting the optical center to ({self.camera.cx}, {self.camera.cy})")

    def update(self, image) -> Frame:
        h,w = image.shape[:2]
        self._ensure_center(w, h)
        if self.landmarker is None:
            from ..face.landmarks import FaceMeshLandmarks
            self.landmarker = FaceMeshLandmarks()
        faces = self.landmarker(image)
        return Frame(landmarks=tuple(f["pts"] for f in faces),
                     image_size=(w, h),
                     boxes=tuple(f["bbox"] for f in faces) if all(f.get("bbox") is not None for f in faces) else ())

    def solve(self, landmarks) -> np.ndarray:
        """
        Rigid head->camera transform (4x4, meters) explaining one 68-point landmark set.
        Needs the camera principal point: set it, or go through pose() with a Frame.
        """
        img_pts = image_points(landmarks)
        # solvePnP refines the seed in place: always hand it fresh copies
        rvec = self.initial_rvec.copy()
        tvec = self.initial_tvec.copy()
        _, rvec, tvec = cv2.solvePnP(MODEL_POINTS, img_pts, self.camera.K, None,
                                     rvec, tvec, useExtrinsicGuess=True,
                                     flags=cv2.SOLVEPNP_ITERATIVE)
        return pose_matrix(rvec, tvec)

    def pose(self, frame: Frame, face_idx: int) -> np.ndarray:
        landmarks = frame.face(face_idx)
        self._ensure_center(*frame.image_size)
        return self.solve(landmarks)

    def poses(self, frame: Frame) -> List[np.ndarray]:
        return [self.pose(frame, i) for i in range(len(frame))]

    def reprojection_error(self, landmarks, pose: np.ndarray) -> float:
        """RMS pixel distance between the observed and reprojected model points."""
        pose = np.asarray(pose, dtype=np.float64)
        proj = self.camera.project(MODEL_POINTS, pose[:3,:3], pose[:3,3]*1000.0)
        err = np.linalg.norm(proj - image_points(landmarks), axis=1)
        return float(np.sqrt(np.mean(err**2)))
