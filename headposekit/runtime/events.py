from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional, Literal, List, Tuple
import asyncio, websockets, time
import numpy as np

from ..estimation.headpose import Frame, HeadPoseEstimator, euler_angles

class FacePose(BaseModel):
    face: int
    translation: List[float]  # meters, camera frame
    rotation: List[List[float]]
    yaw: float=0.0; pitch: float=0.0; roll: float=0.0
    reprojection_error: float=0.0
    low_confidence: bool=False
    bbox: Optional[Tuple[float,float,float,float]]=None

class Event(BaseModel):
    ts: float = Field(default_factory=lambda: time.time())
    type: Literal["poses","no_face"]
    frame: int = 0
    poses: List[FacePose] = []

def face_pose(est: HeadPoseEstimator, frame: Frame, idx: int, pose: np.ndarray, max_err: float=8.0) -> FacePose:
    err = est.reprojection_error(frame.face(idx), pose)
    yaw, pitch, roll = euler_angles(pose, est.initial_rvec.ravel())
    return FacePose(face=idx, translation=pose[:3,3].tolist(), rotation=pose[:3,:3].tolist(),
                    yaw=yaw, pitch=pitch, roll=roll, reprojection_error=err,
                    low_confidence=bool(err > max_err or pose[2,3] <= 0),
                    bbox=frame.boxes[idx] if frame.boxes else None)

def frame_event(est: HeadPoseEstimator, frame: Frame, poses, frame_no: int=0, max_err: float=8.0) -> Event:
    if not len(frame):
        return Event(type="no_face", frame=frame_no)
    return Event(type="poses", frame=frame_no,
                 poses=[face_pose(est, frame, i, p, max_err) for i,p in enumerate(poses)])

QUEUE_SIZE = 64

def publish(queue: "asyncio.Queue[str]", msg: str, bcast: Optional["asyncio.Task"]=None):
    """Hand a line to the broadcaster; re-raise its error if it has died."""
    if bcast is not None and bcast.done():
        bcast.result()
        raise RuntimeError("WebSocket broadcast stopped")
    # clients only care about fresh poses: drop the oldest line when full
    if queue.full(): queue.get_nowait()
    queue.put_nowait(msg)

async def ws_broadcast(queue: "asyncio.Queue[str]", host="0.0.0.0", port=8765):
    clients=set()
    async def handler(websocket):
        clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            clients.discard(websocket)
    async with websockets.serve(handler, host, port):
        while True:
            msg = await queue.get()
            websockets.broadcast(clients, msg)
