"""Run all four detectors on a frame pair and show the results."""
from __future__ import annotations

import argparse

from mrfmotion import DEFAULT_SIGMA_S, DEFAULT_T, DEFAULT_THETA, ThresholdEngine
from mrfmotion.utils import load_frame_pair
from mrfmotion.viz import render_results


def main():
    parser = argparse.ArgumentParser(description="MRF motion detection demo")
    parser.add_argument("frame1", nargs="?", default="./Images/missa_1.tif", help="Frame at time t_k")
    parser.add_argument("frame2", nargs="?", default="./Images/missa_50.tif", help="Frame at time t_k+1")
    parser.add_argument("--theta", type=float, default=DEFAULT_THETA)
    parser.add_argument("--sigma-s", type=float, default=DEFAULT_SIGMA_S)
    parser.add_argument("-T", "--temperature", type=float, default=DEFAULT_T)
    args = parser.parse_args()

    img1, img2 = load_frame_pair(args.frame1, args.frame2)
    md = ThresholdEngine(args.theta, args.sigma_s, args.temperature)

    render_results(
        {
            "Absolute difference": md.abs_difference(img1, img2),
            "Fixed threshold": md.fixed_threshold(img1, img2),
            "Variable threshold - MRF1": md.variable_threshold1(img1, img2),
            "Variable threshold - MRF2": md.variable_threshold2(img1, img2),
        },
        show=True,
    )


if __name__ == "__main__":
    main()
