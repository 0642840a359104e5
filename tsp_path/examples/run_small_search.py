import random

from tsp_path.data import fixture_towns
from tsp_path.evolutionary import EvolutionarySearch, EvolutionConfig


def main():
    towns = fixture_towns(12)
    cfg = EvolutionConfig.from_preset("quick", random_seed=7)
    search = EvolutionarySearch(cfg, towns, rng=random.Random(cfg.random_seed))
    while search.running:
        search.step()
        if search.generation % 10 == 0:
            print(f"gen {search.generation}: best={search.best_score:.2f}")
    result = search.result()
    print(f"best tour {result.tour} length={result.fitness:.2f} ({result.reason})")


if __name__ == "__main__":
    main()
