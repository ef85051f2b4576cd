from __future__ import annotations
from dataclasses import dataclass, asdict
from pathlib import Path
import json
import numpy as np

@dataclass
class CameraModel:
    """Pinhole camera, no distortion. The principal point is fixed by the first image seen."""
    focal: float
    cx: float|None = None
    cy: float|None = None

    @property
    def initialized(self) -> bool:
        return self.cx is not None and self.cy is not None

    def ensure_center(self, width:int, height:int) -> bool:
        # one-shot: later frames never move the optical center, whatever their size
        if self.initialized: return False
        self.cx, self.cy = width/2, height/2
        return True

    @property
    def K(self) -> np.ndarray:
        if not self.initialized:
            raise RuntimeError("principal point not set: pass cx/cy or call ensure_center() with the image size")
        return np.array([[self.focal, 0, self.cx],
                         [0, self.focal, self.cy],
                         [0,          0,  1]], dtype=np.float64)

    def project(self, points3d, rotation, translation) -> np.ndarray:
        """points3d: (3,) or (N,3), rotation: 3x3, translation: (3,) in the units of points3d -> (N,2) pixels."""
        P = np.asarray(points3d, dtype=np.float64).reshape(-1, 3)
        R = np.asarray(rotation, dtype=np.float64).reshape(3, 3)
        t = np.asarray(translation, dtype=np.float64).reshape(3, 1)
        cam = self.K @ (R @ P.T + t)
        with np.errstate(divide="ignore", invalid="ignore"):
            uv = cam[:2] / cam[2]
        return uv.T

def load_camera(path: str|Path|None, focal: float) -> CameraModel:
    if path and Path(path).exists():
        data = json.loads(Path(path).read_text())
        return CameraModel(**data)
    return CameraModel(focal=focal)

def save_camera(path: str|Path, camera: CameraModel):
    Path(path).write_text(json.dumps(asdict(camera), indent=2))
