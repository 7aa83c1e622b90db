import logging
import os

from flask import Flask, abort, jsonify

from chain_spec import PRESETS, load_chain_spec
from genesis_sig import compute_genesis_hash

logger = logging.getLogger(__name__)

app = Flask(__name__)

# ------------------------
# Config: works locally and on Render
# ------------------------
PORT = int(os.environ.get("PORT", 5000))

# ------------------------
# Helpers
# ------------------------
def spec_or_404(chain_id):
    if chain_id not in PRESETS:
        abort(404, description="Chain not found")
    return load_chain_spec(chain_id)

# ------------------------
# Routes
# ------------------------
@app.route("/")
def index():
    chains = []
    for chain_id in sorted(PRESETS):
        spec = load_chain_spec(chain_id)
        chains.append({
            "chain": chain_id,
            "name": spec.name,
            "id": spec.id,
            "chainType": spec.chain_type.value,
        })
    return jsonify({"chains": chains})

@app.route("/chain/<chain_id>")
def view_chain(chain_id):
    spec = spec_or_404(chain_id)
    return jsonify(spec.to_json())

@app.route("/chain/<chain_id>/genesis")
def view_genesis(chain_id):
    spec = spec_or_404(chain_id)
    return jsonify(spec.build_genesis().to_json())

@app.route("/chain/<chain_id>/hash")
def view_hash(chain_id):
    spec = spec_or_404(chain_id)
    genesis_hash = compute_genesis_hash(spec.build_genesis())
    logger.info("Served genesis hash for %s: %s", chain_id, genesis_hash)
    return jsonify({"chain": chain_id, "genesisHash": genesis_hash})

if __name__ == "__main__":
    app.run(debug=True, port=PORT)
