"""Simple entrypoint to score a sample product against a local wardrobe."""

import json
import sys

from models.candidate import CandidateProduct
from scanner_app.app import ShoppingScannerApp


def main(user_id: str = "local-user") -> None:
    app = ShoppingScannerApp()
    candidate = CandidateProduct(name="Navy Wool Blazer", category="outerwear", primary_color="Navy", style="classic")
    result = app.assistant.score(user_id, candidate)
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main(*sys.argv[1:2])
