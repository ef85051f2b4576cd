from __future__ import annotations
import typer, asyncio, cv2
from rich.console import Console
from pathlib import Path
from typing import Optional
from .io.camera import frames, read_image
from .runtime.config import load_config, build_estimator
from .runtime.events import frame_event, publish, ws_broadcast, QUEUE_SIZE
from .render.overlay import draw_overlay
from .geometry.camera_model import CameraModel, save_camera

app = typer.Typer(add_completion=False, help="Head pose estimation from 68-point facial landmarks (hpk)")
err = Console(stderr=True)

def _source(s: str) -> int|str:
    return int(s) if s.isdigit() else s

@app.command()
def image(path: Path = typer.Argument(..., exists=True, dir_okay=False), config: Optional[Path]=typer.Option(None, exists=True),
          focal: Optional[float]=None, out: Optional[Path]=typer.Option(None, help="write the annotated image here")):
    """
    Estimate every head pose in a single image and print one JSON event.
    """
    cfg = load_config(config, focal_length=focal)
    est = build_estimator(cfg)
    try:
        img = read_image(path)
    except FileNotFoundError as e:
        raise typer.BadParameter(str(e))
    frame = est.update(img)
    poses = est.poses(frame)
    typer.echo(frame_event(est, frame, poses, max_err=cfg.max_reprojection_error).model_dump_json())
    if out:
        cv2.imwrite(str(out), draw_overlay(img, frame.landmarks, poses, est.camera))
        err.print(f"[green]Wrote overlay[/green] {out}")

@app.command()
def run(source: str = typer.Option("0", help="camera index or video file"), config: Optional[Path]=typer.Option(None, exists=True),
        focal: Optional[float]=None, width:int=1280, height:int=720, ws: bool=typer.Option(False, help="broadcast events over WebSocket"),
        host: str="0.0.0.0", port:int=8765, show: bool=False):
    """
    Live head pose: print JSONL events, one per frame; optionally broadcast them and show the overlay.
    """
    cfg = load_config(config, focal_length=focal)
    est = build_estimator(cfg)
    queue: "asyncio.Queue[str]" = asyncio.Queue(maxsize=QUEUE_SIZE)

    async def producer(bcast=None):
        for f in frames(_source(source), width, height):
            img = f["image"]
            frame = est.update(img)
            poses = est.poses(frame)
            line = frame_event(est, frame, poses, f["meta"]["index"], cfg.max_reprojection_error).model_dump_json()
            typer.echo(line)
            if ws: publish(queue, line, bcast)
            if show:
                cv2.imshow("headposekit", draw_overlay(img, frame.landmarks, poses, est.camera))
                # press q to quit
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
            await asyncio.sleep(0)

    async def main():
        if ws:
            err.print(f"[cyan]Broadcasting on ws://{host}:{port}[/cyan]")
            bcast = asyncio.create_task(ws_broadcast(queue, host, port))
            try:
                await producer(bcast)
            finally:
                bcast.cancel()
        else:
            await producer()

    try:
        asyncio.run(main())
    finally:
        if show: cv2.destroyAllWindows()

@app.command()
def camera(save: Path, focal: float=455.0, width: Optional[int]=None, height: Optional[int]=None):
    """
    Write a camera JSON (focal length, optional principal point from the image size) for --config's `camera`.
    """
    cam = CameraModel(focal=focal)
    if width and height: cam.ensure_center(width, height)
    save_camera(save, cam)
    err.print("[green]Saved camera[/green]", save)

if __name__ == "__main__":
    app()
