from __future__ import annotations
import cv2, time
from typing import Iterator, Dict, Any

def frames(source: int|str=0, width: int=1280, height: int=720) -> Iterator[Dict[str,Any]]:
    """Camera index or video path -> {"image", "meta": {"ts", "index"}} dicts."""
    cap = cv2.VideoCapture(source)
    if isinstance(source, int):
        if width:  cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        if height: cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    if not cap.isOpened():
        raise RuntimeError(f"Cannot open camera {source!r}")
    i = 0
    try:
        while True:
            ok, frame = cap.read()
            if not ok: break
            yield {"image": frame, "meta": {"ts": time.time(), "index": i}}
            i += 1
    finally:
        cap.release()

def read_image(path: str):
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise FileNotFoundError(f"Cannot read image {path}")
    return img
