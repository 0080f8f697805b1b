import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from shelfspace.models.product import Product
from shelfspace.models.shelf import Gondola
from shelfspace.models.solver_config import SolverConfig
from shelfspace.utils.error_handler import ValidationError
from shelfspace.utils.logger import get_logger

@dataclass
class Scenario:
    """One optimizer request read from disk"""
    products: List[Product] = field(default_factory=list)
    gondolas: List[Gondola] = field(default_factory=list)
    config: SolverConfig = field(default_factory=SolverConfig)

class DataLoader:
    """Load optimizer scenarios from JSON files"""

    def __init__(self, data_path: str = "data"):
        self.data_path = Path(data_path)
        self.logger = get_logger()

    def _resolve(self, name: Union[str, Path]) -> Path:
        path = Path(name)
        if path.exists():
            return path
        candidate = self.data_path / path
        if candidate.exists():
            return candidate
        if candidate.suffix != '.json' and candidate.with_suffix('.json').exists():
            return candidate.with_suffix('.json')
        raise FileNotFoundError(f"Scenario file not found: {name}")

    def load_scenario(self, name: Union[str, Path]) -> Scenario:
        """Read ``{"products": [...], "gondolas": [...], "config": {...}}``"""
        file_path = self._resolve(name)
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        scenario = self.scenario_from_dict(data)
        self.logger.info(
            f"Loaded scenario {file_path.name}: {len(scenario.products)} products, "
            f"{len(scenario.gondolas)} gondolas"
        )
        return scenario

    def scenario_from_dict(self, data: Dict) -> Scenario:
        try:
            products = [Product.from_dict(item) for item in data.get('products', [])]
            gondolas = [Gondola.from_dict(item) for item in data.get('gondolas', [])]
            config = SolverConfig.from_dict(data.get('config') or {})
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed scenario: {e}") from e
        return Scenario(products=products, gondolas=gondolas, config=config)
