import numpy as np, pytest
from headposekit.geometry.camera_model import CameraModel, load_camera, save_camera

def test_center_set_once():
    cam = CameraModel(focal=500)
    assert not cam.initialized
    with pytest.raises(RuntimeError):
        cam.K
    assert cam.ensure_center(640, 480)
    assert not cam.ensure_center(1280, 720)
    assert np.allclose(cam.K, [[500,0,320],[0,500,240],[0,0,1]])

def test_project_pinhole():
    cam = CameraModel(500, 320, 240)
    uv = cam.project([[0,0,1000],[100,50,1000]], np.eye(3), np.zeros(3))
    assert np.allclose(uv, [[320,240],[370,265]])
    # translation applied after rotation
    uv = cam.project((0,0,0), np.eye(3), (0,0,500))
    assert uv.shape == (1,2) and np.allclose(uv, [[320,240]])

def test_camera_json(tmp_path):
    path = tmp_path/"cam.json"
    save_camera(path, CameraModel(600, 300, 200))
    assert load_camera(path, 455) == CameraModel(600, 300, 200)
    assert load_camera(None, 455) == CameraModel(455)
