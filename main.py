# main.py
import json
import sys

from route_sim.app.build import build
from route_sim.config.models import ScenarioModel
from route_sim.io.kernel_logging import json_logger


def run(path: str) -> int:
    with open(path) as f:
        cfg = ScenarioModel.model_validate(json.load(f))
    json_logger(level=cfg.log.level)
    app = build(cfg)
    return app.run()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit("usage: python main.py SCENARIO.json")
    processed = run(sys.argv[1])
    print(f"processed {processed} events", file=sys.stderr)
