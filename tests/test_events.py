import json, asyncio, socket
import numpy as np, cv2, pytest
from headposekit.runtime.events import frame_event, publish, ws_broadcast
from headposekit.estimation.headpose import HeadPoseEstimator, Frame, DEFAULT_RVEC
from headposekit.face.model3d import CORRESPONDENCES
from headposekit.geometry.camera_model import CameraModel

def fake_face():
    R,_ = cv2.Rodrigues(np.array(DEFAULT_RVEC))
    cam = CameraModel(500, 320, 240)
    pts = np.zeros((68,2))
    for _, p3d, feats in CORRESPONDENCES:
        for f in feats: pts[f] = cam.project(p3d, R, (0,0,1000))[0]
    return pts

def test_no_face_event():
    est = HeadPoseEstimator(500)
    ev = frame_event(est, Frame(landmarks=(), image_size=(640,480)), [], frame_no=3)
    assert ev.type == "no_face" and ev.frame == 3 and ev.poses == []

def test_pose_event_json():
    est = HeadPoseEstimator(500)
    frame = Frame(landmarks=(fake_face(),), image_size=(640,480), boxes=((10,20,30,40),))
    ev = frame_event(est, frame, est.poses(frame))
    data = json.loads(ev.model_dump_json())
    assert data["type"] == "poses" and len(data["poses"]) == 1
    p = data["poses"][0]
    assert np.allclose(p["translation"], [0,0,1.0], atol=1e-3)
    assert abs(p["yaw"]) < 0.5 and abs(p["pitch"]) < 0.5
    assert p["low_confidence"] is False and p["bbox"] == [10,20,30,40]

def test_publish_raises_when_broadcast_cannot_bind():
    async def main():
        busy = socket.socket(); busy.bind(("127.0.0.1", 0)); busy.listen(1)
        port = busy.getsockname()[1]
        queue = asyncio.Queue(maxsize=4)
        bcast = asyncio.create_task(ws_broadcast(queue, "127.0.0.1", port))
        try:
            for _ in range(50):
                await asyncio.sleep(0.01)
                if bcast.done(): break
            with pytest.raises(OSError):
                publish(queue, "{}", bcast)
        finally:
            busy.close()
    asyncio.run(main())

def test_publish_keeps_queue_bounded():
    async def main():
        queue = asyncio.Queue(maxsize=3)
        for i in range(10): publish(queue, str(i))
        return [queue.get_nowait() for _ in range(queue.qsize())]
    assert asyncio.run(main()) == ["7", "8", "9"]
