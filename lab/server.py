# lab/server.py
"""
Oracle Lab API Server

Endpoints:
  GET  /health                 — Service status
  GET  /networks               — Known networks and lab deployments
  GET  /networks/{chain_id}    — Single network lookup
  POST /query/id               — Build query data + query id from a typed schema
  GET  /query                  — Last generated query
  POST /value/encode           — ABI-encode a reported value
  GET  /value                  — Last encoded value
  POST /value/decode           — Decode raw value bytes for display
  GET  /feed/{query_id}        — Current aggregate + recent history from the contract
  POST /submit                 — Submit (query id, encoded value) to the contract
"""

import logging
import sys
from typing import List, Optional, Union

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lab import config
from lab.codec import build_query, encode_value
from lab.contract import connect, load_account
from lab.descriptors import FieldDescriptor, QueryDescriptor, from_hex, to_hex
from lab.errors import CodecError, DecodeError
from lab.format import describe_report
from lab.networks import (
    LAB_CONTRACT_ADDRESSES,
    NETWORK_NAMES,
    contract_network_id,
    default_contract,
    has_known_contract,
    is_network_mismatch,
    network_name,
    parse_chain_id,
)
from lab.scheduler import RefreshSchedule, feed_snapshot
from lab.session import LabSession

logging.basicConfig(level=logging.INFO, format="%(asctime)s [LAB] %(message)s")
log = logging.getLogger("lab")

app = FastAPI(
    title="Oracle Lab",
    description="Query id builder, value codec and data feed for the oracle lab contract",
)

session = LabSession()
schedule = RefreshSchedule()

_lab = None


# ── Request bodies ────────────────────────────────────────────────────────────

class FieldModel(BaseModel):
    type: str
    value: str = ""
    scale: Optional[Union[int, str]] = None

    def descriptor(self) -> FieldDescriptor:
        return FieldDescriptor(type=self.type, value=self.value, scale=self.scale)


class QueryRequest(BaseModel):
    query_type: str
    args: List[FieldModel] = []


class ValueRequest(BaseModel):
    values: List[FieldModel]


class DecodeRequest(BaseModel):
    raw: str
    values: Optional[List[FieldModel]] = None


class SubmitRequest(BaseModel):
    query_id: Optional[str] = None
    encoded_value: Optional[str] = None


# ── Collaborators ─────────────────────────────────────────────────────────────

def get_lab():
    global _lab
    if _lab is None:
        if not config.RPC_URL:
            raise HTTPException(status_code=503, detail="No RPC configured (LAB_RPC_URL)")
        _lab = connect(config.RPC_URL, config.CONTRACT_ADDRESS)
        session.set_contract(_lab.address)
        log.info(f"Lab contract: {_lab.address}")
    return _lab


def get_account():
    account = load_account(config.PRIVATE_KEY)
    if account is None:
        raise HTTPException(status_code=503, detail="Submission disabled (LAB_PRIVATE_KEY not set)")
    return account


@app.exception_handler(CodecError)
def codec_error(request: Request, exc: CodecError):
    return JSONResponse({"error": exc.kind, "detail": str(exc)}, status_code=422)


# ── Networks ──────────────────────────────────────────────────────────────────

@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": "oracle-lab",
        "rpc_configured": bool(config.RPC_URL),
        "submit_enabled": bool(config.PRIVATE_KEY),
        "contract": session.contract_address or None,
        "last_submission": session.last_submission,
    }


@app.get("/networks")
def list_networks():
    return {
        "networks": [
            {"chain_id": cid, "name": name, "lab_contract": LAB_CONTRACT_ADDRESSES.get(cid)}
            for cid, name in NETWORK_NAMES.items()
        ]
    }


@app.get("/networks/{chain_id}")
def get_network(chain_id: str):
    cid = parse_chain_id(chain_id)
    if cid is None:
        raise HTTPException(status_code=400, detail=f"Unparseable chain id: {chain_id}")
    return {
        "chain_id": cid,
        "name": network_name(cid),
        "has_known_contract": has_known_contract(cid),
        "lab_contract": default_contract(cid),
    }


# ── Query id / value codec ────────────────────────────────────────────────────

@app.post("/query/id")
def create_query_id(req: QueryRequest):
    descriptor = QueryDescriptor(req.query_type, tuple(a.descriptor() for a in req.args))
    artifact = build_query(descriptor)
    session.record_query(descriptor, artifact)
    log.info(f"Query id {to_hex(artifact.identifier)} for {req.query_type}({len(req.args)} args)")
    return {**descriptor.to_dict(), **artifact.to_dict()}


@app.get("/query")
def get_query():
    if session.query is None:
        raise HTTPException(status_code=404, detail="No query id generated yet")
    descriptor, artifact = session.query
    return {**descriptor.to_dict(), **artifact.to_dict()}


@app.post("/value/encode")
def create_value(req: ValueRequest):
    descriptors = tuple(v.descriptor() for v in req.values)
    encoded = encode_value(descriptors)
    session.record_value(descriptors, encoded)
    return {"values": [d.to_dict() for d in descriptors], "encoded_value": to_hex(encoded)}


@app.get("/value")
def get_value():
    if session.value is None:
        raise HTTPException(status_code=404, detail="No value encoded yet")
    descriptors, encoded = session.value
    return {"values": [d.to_dict() for d in descriptors], "encoded_value": to_hex(encoded)}


@app.post("/value/decode")
def decode_raw_value(req: DecodeRequest):
    if req.values is not None:
        descriptors = [v.descriptor() for v in req.values]
    else:
        descriptors = list(session.value_descriptors())
    try:
        raw = from_hex(req.raw)
    except ValueError:
        raise DecodeError(f"{req.raw!r} is not hex") from None
    result = describe_report(raw, descriptors)
    if result["error"]:
        kind, _, detail = result["error"].partition(": ")
        return JSONResponse({"error": kind, "detail": detail, "raw": result["raw"]}, status_code=422)
    return result


# ── Contract ──────────────────────────────────────────────────────────────────

@app.get("/feed/{query_id}")
def get_feed(query_id: str, lab=Depends(get_lab)):
    try:
        snap = feed_snapshot(lab, query_id, list(session.value_descriptors()), config.HISTORY_LIMIT)
    except CodecError:
        raise
    except Exception as e:
        log.error(f"Feed read failed: {e}")
        return JSONResponse({"error": f"feed read failed: {e}"}, status_code=502)
    return {"query_id": query_id, **snap, "refresh_interval": schedule.current_interval()}


@app.post("/submit")
def submit(req: SubmitRequest, lab=Depends(get_lab), account=Depends(get_account)):
    query_id = req.query_id
    if query_id is None and session.query is not None:
        query_id = to_hex(session.query[1].identifier)
    encoded = req.encoded_value
    if encoded is None and session.value is not None:
        encoded = to_hex(session.value[1])
    if not query_id:
        raise HTTPException(status_code=400, detail="Generate a query id first")
    if not encoded:
        raise HTTPException(status_code=400, detail="Encode a value first")

    chain_id = lab.chain_id()
    if is_network_mismatch(chain_id, lab.address):
        return JSONResponse({
            "error": "network mismatch",
            "detail": (
                f"Signer is on {network_name(chain_id)}, but this contract is deployed on "
                f"{network_name(contract_network_id(lab.address))}"
            ),
        }, status_code=409)

    try:
        value_bytes = from_hex(encoded)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Encoded value is not hex: {encoded}") from None

    try:
        tx_hash = lab.submit(query_id, value_bytes, account, timeout=config.TX_TIMEOUT)
    except CodecError:
        raise
    except Exception as e:
        log.error(f"Submission failed: {e}")
        return JSONResponse({"error": f"submission failed: {e}"}, status_code=502)

    session.set_contract(lab.address)
    session.record_submission(tx_hash)
    schedule.note_submission()
    return {"tx_hash": tx_hash, "query_id": query_id, "encoded_value": encoded, "network": network_name(chain_id)}


if __name__ == "__main__":
    port = int(sys.argv[1]) if len(sys.argv) > 1 else config.PORT
    print(f"Oracle Lab starting on :{port}")
    print(f"  RPC:    {config.RPC_URL or '(not configured)'}")
    print(f"  Submit: {'enabled' if config.PRIVATE_KEY else 'disabled'}")
    uvicorn.run(app, host="0.0.0.0", port=port)
