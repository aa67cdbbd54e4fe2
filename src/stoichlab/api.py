"""HTTP API for the balancer and stoichiometry calculator."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from stoichlab import __version__
from stoichlab.balancer import balance_reaction
from stoichlab.config import Settings, configure_logging, get_settings
from stoichlab.errors import StoichLabError
from stoichlab.masses import resolve_molar_mass
from stoichlab.models import ReactantEntry, Reaction
from stoichlab.reactions import format_equation, parse_reaction
from stoichlab.stoichiometry import evaluate

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SpeciesOut(BaseModel):
    formula: str
    coefficient: int
    molar_mass: float


class BalanceRequest(BaseModel):
    reaction: str


class BalanceResponse(BaseModel):
    equation: str
    balanced: bool
    reactants: List[SpeciesOut]
    products: List[SpeciesOut]


class ReactantIn(BaseModel):
    """Mass entry; non-finite or non-positive masses are dropped before evaluation."""

    compound: str
    mass_g: float


class StoichiometryRequest(BaseModel):
    reaction: str
    reactants: List[ReactantIn] = Field(min_length=1)
    target: Optional[str] = None


class StoichiometryResponse(BaseModel):
    target: str
    theoretical_yield: float
    theoretical_yield_moles: float
    reaction_extent: float
    limiting_reagent: Optional[str] = None
    excess_reagents: Dict[str, float] = {}
    excess_masses: Dict[str, float] = {}
    mole_ratios: Dict[str, int] = {}
    balanced_equation: str
    steps: List[str] = []
    warnings: List[str] = []


class MolarMassRequest(BaseModel):
    formula: str
    strict: bool = False


class MolarMassResponse(BaseModel):
    formula: str
    value: float
    source: str
    warning: Optional[str] = None


def _balance_response(reaction: Reaction) -> BalanceResponse:
    def species(items):
        return [
            SpeciesOut(formula=s.formula, coefficient=s.coefficient, molar_mass=s.molar_mass)
            for s in items
        ]

    return BalanceResponse(
        equation=format_equation(reaction),
        balanced=reaction.balanced,
        reactants=species(reaction.reactants),
        products=species(reaction.products),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="stoichlab", version=__version__)

    def balanced_reaction(text: str) -> Reaction:
        return balance_reaction(
            parse_reaction(text, fallback_molar_mass=settings.fallback_molar_mass),
            epsilon=settings.pivot_epsilon,
            tolerance=settings.fraction_tolerance,
            max_denominator=settings.max_denominator,
        )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        start = _now_ms()
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        response.headers["x-elapsed-ms"] = str(_now_ms() - start)
        return response

    @app.get("/health")
    async def health():
        return {"ok": True, "version": __version__, "ts_ms": _now_ms()}

    @app.post("/balance", response_model=BalanceResponse)
    async def balance(req: BalanceRequest):
        return _balance_response(balanced_reaction(req.reaction))

    @app.post("/stoichiometry", response_model=StoichiometryResponse)
    async def stoichiometry(req: StoichiometryRequest):
        reaction = balanced_reaction(req.reaction)
        entries = [ReactantEntry(compound=r.compound, mass_g=r.mass_g) for r in req.reactants]
        try:
            result = evaluate(
                reaction,
                entries,
                target=req.target or None,
                strict=settings.strict_molar_mass,
                fallback_molar_mass=settings.fallback_molar_mass,
            )
        except StoichLabError as exc:
            logger.info("Rejected stoichiometry request: %s", exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return StoichiometryResponse(**asdict(result))

    @app.post("/molar-mass", response_model=MolarMassResponse)
    async def molar_mass(req: MolarMassRequest):
        try:
            resolved = resolve_molar_mass(
                req.formula,
                fallback=settings.fallback_molar_mass,
                strict=req.strict or settings.strict_molar_mass,
            )
        except StoichLabError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return MolarMassResponse(**asdict(resolved))

    return app
