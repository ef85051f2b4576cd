from __future__ import annotations
import yaml
from pathlib import Path
from typing import Literal, Optional, Tuple
from pydantic import BaseModel, Field

from ..estimation.headpose import DEFAULT_RVEC, DEFAULT_TVEC, HeadPoseEstimator
from ..geometry.camera_model import load_camera

class PoseConfig(BaseModel):
    focal_length: float = Field(455.0, gt=0)
    camera: Optional[str] = None  # JSON with focal, cx, cy
    landmarker: Literal["mediapipe","dlib"] = "mediapipe"
    predictor_path: Optional[str] = None
    max_faces: int = Field(4, ge=1)
    initial_rvec: Tuple[float,float,float] = DEFAULT_RVEC
    initial_tvec: Tuple[float,float,float] = DEFAULT_TVEC
    max_reprojection_error: float = Field(8.0, gt=0)
    verbose: bool = False

def load_config(path: str|Path|None=None, **overrides) -> PoseConfig:
    cfg = {}
    if path:
        with open(path,"r") as f: cfg = yaml.safe_load(f) or {}
    cfg.update({k:v for k,v in overrides.items() if v is not None})
    return PoseConfig.model_validate(cfg)

def build_estimator(cfg: PoseConfig, landmarker=None) -> HeadPoseEstimator:
    if landmarker is None:
        from ..face.landmarks import make_landmarker
        landmarker = make_landmarker(cfg.landmarker, cfg.predictor_path, cfg.max_faces)
    return HeadPoseEstimator(load_camera(cfg.camera, cfg.focal_length), landmarker=landmarker,
                             initial_rvec=cfg.initial_rvec, initial_tvec=cfg.initial_tvec,
                             verbose=cfg.verbose)
