"""configurations for benchmarks."""

from flockers import KDTreeSearch, NaiveSearch

configurations = {
    NaiveSearch: {
        "small": {
            "seeds": 25,
            "replications": 3,
            "steps": 20,
            "width": 640,
            "height": 480,
            "parameters": {
                "population_size": 100,
            },
        },
        "large": {
            "seeds": 10,
            "replications": 3,
            "steps": 10,
            "width": 1280,
            "height": 960,
            "parameters": {
                "population_size": 400,
            },
        },
    },
    KDTreeSearch: {
        "small": {
            "seeds": 25,
            "replications": 3,
            "steps": 20,
            "width": 640,
            "height": 480,
            "parameters": {
                "population_size": 100,
            },
        },
        "large": {
            "seeds": 10,
            "replications": 3,
            "steps": 10,
            "width": 1280,
            "height": 960,
            "parameters": {
                "population_size": 400,
            },
        },
    },
}
