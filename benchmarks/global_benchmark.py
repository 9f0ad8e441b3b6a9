"""Time flock initialisation and frames for each neighbour search strategy."""

import gc
import timeit

from configurations import configurations

from flockers import Flock, FlockConfig


def run_model(search_class, seed, steps, width, height, parameters):
    """Build a flock and run it, returning (init time, run time)."""
    config = FlockConfig(**parameters)
    start_init = timeit.default_timer()
    flock = Flock(
        width=width,
        height=height,
        population_size=config.population_size,
        rng=seed,
        neighbor_search=search_class(),
    )
    end_init_start_run = timeit.default_timer()

    flock.run(steps, config)

    end_run = timeit.default_timer()
    return (end_init_start_run - start_init), (end_run - end_init_start_run)


def run_experiments(search_class, config):
    """Run every seed and replication of a configuration and keep the fastest times."""
    gc.enable()

    init_times = []
    run_times = []
    for seed in range(1, config["seeds"] + 1):
        fastest_init = float("inf")
        fastest_run = float("inf")
        for _ in range(config["replications"]):
            init_time, run_time = run_model(
                search_class,
                seed,
                config["steps"],
                config["width"],
                config["height"],
                config["parameters"],
            )
            fastest_init = min(fastest_init, init_time)
            fastest_run = min(fastest_run, run_time)
        init_times.append(fastest_init)
        run_times.append(fastest_run)

    return init_times, run_times


if __name__ == "__main__":
    results = {}
    start_time = timeit.default_timer()
    for search_class, sizes in configurations.items():
        for size, config in sizes.items():
            init_times, run_times = run_experiments(search_class, config)
            mean_init = sum(init_times) / len(init_times)
            mean_run = sum(run_times) / len(run_times)
            results[(search_class.__name__, size)] = (mean_init, mean_run)
            print(
                f"{search_class.__name__:<14} {size:<6} "
                f"init {mean_init:.4f}s  run {mean_run:.4f}s"
            )

    print(f"Total benchmark time: {timeit.default_timer() - start_time:.2f} seconds")
