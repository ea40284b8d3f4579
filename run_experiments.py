# run_experiments.py
import os, json, argparse, logging
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from tspsolve import TSPInstance, SAConfig, SimulatedAnnealing
from tspsolve.experiments import compare_solvers, run_repeated_trials

OUTDIR = os.path.dirname(os.path.abspath(__file__))
EXACT_LIMIT = 10  # exhaustive search is only practical below ~11 cities


def ensure(path: str) -> str:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    return path


def plot_scatter(details, optimum, save_path):
    plt.figure()
    lengths = [L for (L, t, tour) in details]
    x = np.random.normal(loc=1, scale=0.03, size=len(lengths))
    plt.plot(x, lengths, "o", label="simulated annealing")
    if optimum is not None:
        plt.axhline(optimum, linestyle="--", color="k", label="exact optimum")
    plt.xticks([1], ["SA"])
    plt.ylabel("Best tour length")
    plt.title("Best lengths across runs")
    plt.legend()
    ensure(save_path)
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close()


def plot_convergence(inst, cfg, save_path):
    state, _ = SimulatedAnnealing(inst, cfg).run()
    df = pd.DataFrame([vars(h) for h in state.history])
    ax = df.plot(x="iteration", y=["current_cost", "best_cost"])
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Tour length")
    ax.set_title("Simulated annealing convergence")
    ensure(save_path)
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close()
    return df


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--n", type=int, default=8)
    ap.add_argument("--square", type=float, default=100.0)
    ap.add_argument("--runs", type=int, default=5)
    ap.add_argument("--t0", type=float, default=1500.0)
    ap.add_argument("--cooling", type=float, default=0.995)
    ap.add_argument("--iters", type=int, default=2000)
    ap.add_argument("--bound", choices=["mst", "nearest_neighbor"], default="mst")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    inst = TSPInstance.random_euclidean(n=args.n, seed=123, square_size=args.square, name=f"demo{args.n}")
    cfg = SAConfig(t0=args.t0, cooling_rate=args.cooling, max_iterations=args.iters)

    names = ["simulated-annealing"]
    if args.n <= EXACT_LIMIT:
        names = ["exhaustive", "branch-and-bound"] + names
    else:
        print(f"Skipping exact solvers for n={args.n} (> {EXACT_LIMIT})")
    rows = compare_solvers(inst, names, cfg, bound=args.bound)
    df_summary = pd.DataFrame.from_records(rows)
    print(df_summary[["solver", "cost", "elapsed_sec"]].to_string(index=False))
    df_summary.to_csv(os.path.join(OUTDIR, "results_summary.csv"), index=False)
    optimum = min(r["cost"] for r in rows if r["solver"] != "simulated-annealing") if args.n <= EXACT_LIMIT else None

    # repeated SA trials
    stats, details = run_repeated_trials(inst, cfg, n_runs=args.runs)
    print(json.dumps(stats, indent=2))
    plot_scatter(details, optimum, os.path.join(OUTDIR, "results_distribution.png"))

    history = plot_convergence(inst, cfg, os.path.join(OUTDIR, "convergence_SA.png"))
    history.to_csv(os.path.join(OUTDIR, "sa_history.csv"), index=False)


if __name__ == "__main__":
    main()
