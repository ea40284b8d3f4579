import os, argparse
import matplotlib.pyplot as plt
import imageio

from tspsolve import TSPInstance, SAConfig, SimulatedAnnealing, steps_per_frame


def tour_to_xy(coords, tour):
    xs = [coords[i][0] for i in tour] + [coords[tour[0]][0]]
    ys = [coords[i][1] for i in tour] + [coords[tour[0]][1]]
    return xs, ys


def draw_frame(inst, state, frame_path, show_best=True):
    coords = inst.coords
    plt.figure(figsize=(5, 5))
    if show_best and len(state.best_tour) > 1:
        xs, ys = tour_to_xy(coords, state.best_tour)
        plt.plot(xs, ys, "-", color="#22c55e", alpha=0.3)
    if len(state.current_tour) > 1:
        xs, ys = tour_to_xy(coords, state.current_tour)
        plt.plot(xs, ys, "-", color="#3b82f6")
    plt.plot([c[0] for c in coords], [c[1] for c in coords], "o", color="#ef4444")
    for p in inst.points:
        plt.annotate(p.label, (p.x, p.y), xytext=(3, 0), textcoords="offset points", fontsize=6)
    plt.title(f"iter={state.iteration}/{state.max_iterations}  "
              f"current={state.current_cost:.2f}  best={state.best_cost:.2f}")
    plt.axis("equal")
    plt.tight_layout()
    plt.savefig(frame_path, dpi=120, bbox_inches="tight")
    plt.close()


def plot_history(state, save_path):
    its = [h.iteration for h in state.history]
    fig, ax = plt.subplots()
    ax.plot(its, [h.current_cost for h in state.history], label="Current Distance", color="#3b82f6")
    ax.plot(its, [h.best_cost for h in state.history], label="Best Distance", color="#22c55e")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Tour length")
    ax2 = ax.twinx()
    ax2.plot(its, [h.temperature for h in state.history], label="Temperature", color="#ef4444")
    ax2.set_ylabel("Temperature")
    fig.legend(loc="upper right")
    fig.tight_layout()
    fig.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


def visualize(inst, cfg, outdir, fps=30, speed=500):
    """Drive the annealing engine one frame at a time and record each frame."""
    os.makedirs(outdir, exist_ok=True)
    engine = SimulatedAnnealing(inst, cfg)
    state = engine.initialize()
    batch = steps_per_frame(speed, fps)

    frames = []
    while True:
        frame_path = os.path.join(outdir, f"sa_frame_{len(frames):04d}.png")
        draw_frame(inst, state, frame_path)
        frames.append(frame_path)
        if state.is_complete:
            break
        state = engine.step_batch(state, batch)

    gif_path = os.path.join(outdir, "sa_convergence.gif")
    with imageio.get_writer(gif_path, mode="I", duration=1.0 / fps) as writer:
        for fp in frames:
            writer.append_data(imageio.v2.imread(fp))
    plot_history(state, os.path.join(outdir, "sa_history.png"))

    print("Saved:", gif_path)
    print(f"best length={state.best_cost:.2f} after {state.iteration} iterations")
    return state


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--n", type=int, default=10, help="number of cities")
    p.add_argument("--t0", type=float, default=1500.0, help="initial temperature")
    p.add_argument("--cooling", type=float, default=0.995)
    p.add_argument("--iters", type=int, default=2000)
    p.add_argument("--speed", type=float, default=500, help="iterations per second")
    p.add_argument("--fps", type=float, default=30)
    p.add_argument("--square", type=float, default=100.0)
    p.add_argument("--seed", type=int, default=321)
    p.add_argument("--outdir", default="viz")
    args = p.parse_args()

    inst = TSPInstance.random_euclidean(n=args.n, seed=args.seed, square_size=args.square, name=f"viz{args.n}")
    cfg = SAConfig(t0=args.t0, cooling_rate=args.cooling, max_iterations=args.iters, seed=args.seed)
    visualize(inst, cfg, args.outdir, fps=args.fps, speed=args.speed)

if __name__ == "__main__":
    main()
