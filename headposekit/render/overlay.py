from __future__ import annotations
from typing import Sequence
import numpy as np
import cv2

from ..face.model3d import SKELETON, Feature
from ..geometry.camera_model import CameraModel
from ..estimation.headpose import FaceIndexError

LINE_COLOR = (0,128,128)
TEXT_COLOR = (0,0,255)
AXIS_COLORS = [(0,0,255), (0,255,0), (255,0,0)]  # x red, y green, z blue (BGR)
AXIS_LEN_MM = 50.0
AXES = np.array([[0,0,0],[AXIS_LEN_MM,0,0],[0,AXIS_LEN_MM,0],[0,0,AXIS_LEN_MM]], dtype=np.float64)

def _pt(p):
    return int(round(float(p[0]))), int(round(float(p[1])))

def draw_features(img, pts):
    for first, last, closed in SKELETON:
        for i in range(first+1, last+1):
            cv2.line(img, _pt(pts[i-1]), _pt(pts[i]), LINE_COLOR, 2, cv2.LINE_AA)
        if closed:
            cv2.line(img, _pt(pts[first]), _pt(pts[last]), LINE_COLOR, 2, cv2.LINE_AA)

def draw_pose(img, pose, pts, camera: CameraModel):
    pose = np.asarray(pose, dtype=np.float64)
    # label sits on the landmarks, so it is drawn even when the triad is not
    x,y,z = (int(v*100) for v in pose[:3,3])
    cv2.putText(img, f"({x}cm, {y}cm, {z}cm)", _pt(pts[Feature.SELLION]),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, TEXT_COLOR, 2)
    if pose[2,3] <= 0: return  # mirror solution, head behind the camera
    uv = camera.project(AXES, pose[:3,:3], pose[:3,3]*1000.0)
    if not np.all(np.isfinite(uv)) or np.abs(uv).max() > 1e5:
        return
    o = _pt(uv[0])
    for tip, color in zip(uv[1:], AXIS_COLORS):
        cv2.line(img, o, _pt(tip), color, 2, cv2.LINE_AA)

def draw_overlay(image, landmarks: Sequence[np.ndarray], poses: Sequence[np.ndarray], camera: CameraModel):
    """Annotated copy of image: feature outline per face, axis triad + distance label per pose."""
    if len(poses) > len(landmarks):
        raise FaceIndexError(f"{len(poses)} poses but only {len(landmarks)} landmark sets")
    out = image.copy()
    for pts in landmarks:
        draw_features(out, pts)
    for pose, pts in zip(poses, landmarks):
        draw_pose(out, pose, pts, camera)
    return out
