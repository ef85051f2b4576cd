from __future__ import annotations
import numpy as np
import cv2

# FaceMesh (468) index for each point of the 68-point scheme
MESH_TO_68 = [
    # jaw
    127, 234, 93, 132, 58, 136, 150, 176, 152, 400, 379, 365, 288, 361, 323, 454, 356,
    # brows
    70, 63, 105, 66, 107, 336, 296, 334, 293, 300,
    # nose bridge, nose base
    168, 197, 5, 4, 75, 97, 2, 326, 305,
    # eyes
    33, 160, 158, 133, 153, 144, 362, 385, 387, 263, 373, 380,
    # outer lips, inner lips
    61, 39, 37, 0, 267, 269, 291, 405, 314, 17, 84, 181,
    78, 82, 13, 312, 308, 317, 14, 87,
]

class FaceMeshLandmarks:
    """MediaPipe FaceMesh resampled to the 68-point scheme, pixel coordinates."""
    def __init__(self, static_image_mode=False, max_num_faces=4):
        import mediapipe as mp
        self.mesh = mp.solutions.face_mesh.FaceMesh(static_image_mode=static_image_mode,
                                                    max_num_faces=max_num_faces)

    def __call__(self, frame_bgr):
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        res = self.mesh.process(rgb)
        if not res.multi_face_landmarks: return []
        faces=[]
        h,w = frame_bgr.shape[:2]
        for lms in res.multi_face_landmarks:
            mesh = np.array([(lm.x*w, lm.y*h) for lm in lms.landmark], dtype=np.float32)
            x0,y0 = mesh.min(axis=0); x1,y1 = mesh.max(axis=0)
            faces.append({"pts": mesh[MESH_TO_68], "bbox": (float(x0),float(y0),float(x1),float(y1)),
                          "score": float((x1-x0)*(y1-y0))})
        # largest (closest) face first
        faces.sort(key=lambda f: f["score"], reverse=True)
        return faces

class DlibLandmarks:
    """dlib HOG face detector + 68-point shape predictor (iBUG model file)."""
    def __init__(self, predictor_path: str, upsample:int=0):
        import dlib
        self.detector = dlib.get_frontal_face_detector()
        self.predictor = dlib.shape_predictor(str(predictor_path))
        self.upsample = upsample

    def __call__(self, frame_bgr):
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        faces=[]
        for rect in self.detector(rgb, self.upsample):
            shape = self.predictor(rgb, rect)
            pts = np.array([(shape.part(i).x, shape.part(i).y) for i in range(68)], dtype=np.float32)
            faces.append({"pts": pts, "bbox": (float(rect.left()), float(rect.top()),
                                               float(rect.right()), float(rect.bottom())),
                          "score": float(rect.area())})
        return faces

def make_landmarker(kind: str="mediapipe", predictor_path: str|None=None, max_faces:int=4):
    if kind == "dlib":
        if not predictor_path:
            raise ValueError("dlib landmarker needs predictor_path (shape_predictor_68_face_landmarks.dat)")
        return DlibLandmarks(predictor_path)
    if kind == "mediapipe":
        return FaceMeshLandmarks(max_num_faces=max_faces)
    raise ValueError(f"unknown landmarker: {kind}")
