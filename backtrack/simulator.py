"""
Landmark Stream Simulator

Stands in for the camera + pose model: random-walks a seated upper body
and streams MediaPipe-style landmark frames to the posture engine.

Usage:
    python -m backtrack.simulator --seconds 60
    python -m backtrack.simulator --profile slouch --calibrate
"""

import argparse
import random
import sys
import time
from typing import Dict, List

import requests

from backtrack import config

POSE_LANDMARK_COUNT = 33

# Neutral seated pose in normalized, mirrored image coordinates
NEUTRAL = {
    "nose_y": 0.35,
    "shoulder_y": 0.60,
    "shoulder_width": 0.40,   # ~60cm from the camera
    "tilt": 0.0               # left_y - right_y
}

# Where each profile drifts towards
PROFILES = {
    "good": {},
    "slouch": {"nose_y": 0.45},
    "lean": {"tilt": 0.12},
    "close": {"shoulder_width": 0.62},
}

DRIFT = 0.05            # share of the remaining gap closed per frame
JITTER = 0.004          # per-frame noise


class PoseWalker:
    """Tracks the current pose parameters with a drifting random walk"""

    def __init__(self, profile: str):
        self.current = dict(NEUTRAL)
        self.target = {**NEUTRAL, **PROFILES[profile]}

    def next_values(self) -> Dict[str, float]:
        for key, target in self.target.items():
            value = self.current[key]
            value += (target - value) * DRIFT + random.uniform(-JITTER, JITTER)
            self.current[key] = value
        return dict(self.current)


def build_landmarks(pose: Dict[str, float]) -> List[Dict[str, float]]:
    """Lay the pose parameters out on the 33-point MediaPipe Pose index."""
    half_width = pose["shoulder_width"] / 2
    landmarks = [
        {"x": 0.5, "y": 0.9, "z": 0.0, "visibility": 0.1}
        for _ in range(POSE_LANDMARK_COUNT)
    ]
    landmarks[0] = {"x": 0.5, "y": pose["nose_y"], "z": -0.3, "visibility": 0.99}
    # Mirrored view: left shoulder sits on the right of the image
    landmarks[11] = {"x": 0.5 + half_width, "y": pose["shoulder_y"] + pose["tilt"] / 2,
                     "z": -0.1, "visibility": random.uniform(0.9, 0.99)}
    landmarks[12] = {"x": 0.5 - half_width, "y": pose["shoulder_y"] - pose["tilt"] / 2,
                     "z": -0.1, "visibility": random.uniform(0.9, 0.99)}
    return landmarks


def post(base_url: str, path: str, payload=None):
    response = requests.post(f"{base_url}{path}", json=payload, timeout=10)
    response.raise_for_status()
    return response.json()


def run(base_url: str, profile: str, seconds: float, fps: int, calibrate: bool):
    print(f"\n🎥 Streaming '{profile}' posture to {base_url} at {fps} FPS for {seconds}s")

    if calibrate:
        post(base_url, "/calibration")
        calibration_walker = PoseWalker("good")
        for _ in range(int(fps * (config.CALIBRATION_SECONDS + 1))):
            post(base_url, "/frames", {"landmarks": build_landmarks(calibration_walker.next_values())})
            time.sleep(1.0 / fps)
        print("📐 Calibration frames sent")

    post(base_url, "/sessions/start")
    walker = PoseWalker(profile)
    frame_interval = 1.0 / fps
    deadline = time.time() + seconds
    frame_id = 0

    while time.time() < deadline:
        frame_start = time.time()
        analysis = post(base_url, "/frames", {
            "landmarks": build_landmarks(walker.next_values()),
            "timestamp_ms": frame_start * 1000
        })
        frame_id += 1

        if frame_id % fps == 0:
            print(f"   ├─ frame {frame_id}: {analysis['status']:<12} "
                  f"dist={analysis['distance']}cm lean={analysis['lean_angle']}° "
                  f"slouch={analysis['shoulder_angle']}°")

        time.sleep(max(0.0, frame_interval - (time.time() - frame_start)))

    summary = post(base_url, "/sessions/stop")
    print(f"\n✅ Session finished: score={summary['posture_score']} "
          f"alerts={summary['stats']['alerts']}")


def main():
    parser = argparse.ArgumentParser(description="Stream synthetic pose landmarks")
    parser.add_argument("--base-url", default=config.SIMULATOR_BASE_URL)
    parser.add_argument("--profile", choices=sorted(PROFILES), default="good")
    parser.add_argument("--seconds", type=float, default=30.0)
    parser.add_argument("--fps", type=int, default=config.SIMULATOR_FPS)
    parser.add_argument("--calibrate", action="store_true",
                        help="send a calibration window of good posture first")
    args = parser.parse_args()

    try:
        run(args.base_url, args.profile, args.seconds, args.fps, args.calibrate)
    except requests.exceptions.ConnectionError:
        print(f"❌ Could not connect to {args.base_url}. Is the server running?")
        sys.exit(1)
    except requests.HTTPError as e:
        print(f"❌ Request failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
