# -*- coding: utf-8 -*-
from __future__ import annotations
import os
from typing import Dict, List, Optional, Sequence

import numpy as np
import matplotlib as mpl
import matplotlib.pyplot as plt

from . import config

# ---------------- 样式 ----------------
_STYLES = {
    "default": {"figure.dpi":120,"savefig.dpi":170,"font.size":10,"axes.titlesize":11,"axes.labelsize":10,
                "legend.fontsize":9,"xtick.labelsize":9,"ytick.labelsize":9,"axes.spines.top":False,
                "axes.spines.right":False,"axes.grid":True,"grid.alpha":0.25,"lines.linewidth":1.3,
                "lines.markersize":4.5,"legend.frameon":False},
    "ieee":    {"figure.dpi":120,"savefig.dpi":200,"font.size":9,"axes.titlesize":10,"axes.labelsize":9,
                "legend.fontsize":8,"xtick.labelsize":8,"ytick.labelsize":8,"axes.spines.top":False,
                "axes.spines.right":False,"axes.grid":True,"grid.alpha":0.25,"lines.linewidth":1.2,
                "lines.markersize":4.0,"legend.frameon":False},
    "acm":     {"figure.dpi":120,"savefig.dpi":200,"font.size":10,"axes.titlesize":12,"axes.labelsize":10,
                "legend.fontsize":9,"xtick.labelsize":9,"ytick.labelsize":9,"axes.spines.top":False,
                "axes.spines.right":False,"axes.grid":True,"grid.alpha":0.25,"lines.linewidth":1.4,
                "lines.markersize":5.0,"legend.frameon":False},
    "nature":  {"figure.dpi":120,"savefig.dpi":200,"font.size":11,"axes.titlesize":13,"axes.labelsize":11,
                "legend.fontsize":10,"xtick.labelsize":10,"ytick.labelsize":10,"axes.spines.top":False,
                "axes.spines.right":False,"axes.grid":True,"grid.alpha":0.25,"lines.linewidth":1.2,
                "lines.markersize":4.8,"legend.frameon":False},
}
def apply_style(style:str="default"): mpl.rcParams.update(_STYLES[config.normalize_style(style)])

# ---------------- 工具 ----------------
def _unique_path(path:str)->str:
    if not os.path.exists(path): return path
    b,e = os.path.splitext(path); i=1
    while True:
        cand=f"{b}_{i}{e}"
        if not os.path.exists(cand): return cand
        i+=1

def _group_by_pattern(rows:Sequence[Dict])->Dict[str,List[Dict]]:
    out: Dict[str,List[Dict]] = {}
    for r in rows:
        out.setdefault(str(r["pattern"]), []).append(r)
    for v in out.values():
        v.sort(key=lambda r: int(r["n"]))
    return out

# ---------------- 缺席概率曲线 ----------------
def plot_absence_curve(rows:Sequence[Dict], out_dir:str, style:str="default",
                       digits_mark:Optional[int]=None, fname:str="absence_curve.png")->str:
    """
    横轴 N（对数），纵轴 P(未出现)；多个模式各画一条。
    N=0 的点在对数轴上无法显示，绘图时跳过。
    digits_mark: 在该 N 处画竖线（通常是搜索空间大小）。
    """
    apply_style(style)
    os.makedirs(out_dir, exist_ok=True)
    fig, ax = plt.subplots(figsize=(5.2, 3.4))
    for pat, rs in _group_by_pattern(rows).items():
        xs = np.array([int(r["n"]) for r in rs if int(r["n"]) > 0], dtype=np.float64)
        ys = np.array([float(r["p_absent"]) for r in rs if int(r["n"]) > 0], dtype=np.float64)
        if xs.size == 0:
            continue
        ax.plot(xs, ys, marker="o", label=f"{pat} (m={len(pat)})")
    if digits_mark:
        ax.axvline(float(digits_mark), color="0.4", linestyle="--", linewidth=0.9, label=f"N={digits_mark:.3g}")
    ax.set_xscale("log")
    ax.set_ylim(-0.02, 1.02)
    ax.set_xlabel("digits searched N")
    ax.set_ylabel("P(pattern absent)")
    ax.set_title("Pattern absence probability")
    ax.legend(loc="best")
    fig.tight_layout()
    path = _unique_path(os.path.join(out_dir, fname))
    fig.savefig(path)
    plt.close(fig)
    return path

__all__ = ["apply_style", "plot_absence_curve"]
