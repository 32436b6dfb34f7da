"""
Option router factory.

build_option_router(entity) mounts the full lifecycle surface of one kind
under /api/{slug}. Routers stay thin: parse the request, call
OptionService, wrap the result in the response envelope.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import Envelope, envelope
from options_api.registry import OPTION_ENTITIES, OptionEntity
from options_api.schemas import (
    OptionId,
    OptionKindOutput,
    create_schema,
    output_schema,
    update_item_schema,
    update_schema,
)
from options_api.services.option_service import OptionService


def build_option_router(entity: OptionEntity) -> APIRouter:
    """Create the CRUD router for one option kind."""
    CreateSchema = create_schema(entity)
    UpdateSchema = update_schema(entity)
    UpdateItemSchema = update_item_schema(entity)
    Output = output_schema(entity)
    label = entity.label

    router = APIRouter(prefix=f"/api/{entity.slug}", tags=[label])

    def get_service(db: Session = Depends(get_db)) -> OptionService:
        return OptionService(db, entity)

    # =========================================================================
    # Create
    # =========================================================================

    @router.post(
        "/create/one",
        status_code=status.HTTP_201_CREATED,
        response_model=Envelope[Output],
    )
    def create_one(body: CreateSchema, service: OptionService = Depends(get_service)):
        option = service.create_one(body)
        return envelope(option, f"{label} created successfully", status.HTTP_201_CREATED)

    @router.post(
        "/create/many",
        status_code=status.HTTP_201_CREATED,
        response_model=Envelope[list[Output]],
    )
    def create_many(
        body: list[CreateSchema] = Body(...),
        service: OptionService = Depends(get_service),
    ):
        options = service.create_many(body)
        return envelope(
            options, f"{len(options)} {label}s created successfully", status.HTTP_201_CREATED
        )

    # =========================================================================
    # Read
    # =========================================================================

    @router.get("/read/one/{option_id}", response_model=Envelope[Output])
    def read_one(option_id: str, service: OptionService = Depends(get_service)):
        return envelope(service.read_one(option_id), f"{label} retrieved successfully")

    @router.post("/read/many", response_model=Envelope[list[Output]])
    def read_many(
        ids: list[Optional[OptionId]] = Body(...),
        service: OptionService = Depends(get_service),
    ):
        options = service.read_many(ids)
        return envelope(options, f"{len(options)} {label}s retrieved successfully")

    @router.get("/read/all", response_model=Envelope[list[Output]])
    def read_all(service: OptionService = Depends(get_service)):
        options = service.read_all()
        return envelope(options, f"{len(options)} {label}s retrieved successfully")

    @router.get("/read/hard/all", response_model=Envelope[list[Output]])
    def hard_read_all(service: OptionService = Depends(get_service)):
        options = service.hard_read_all()
        return envelope(options, f"{len(options)} {label}s retrieved, deleted included")

    # =========================================================================
    # Update
    # =========================================================================

    @router.put("/update/one/{option_id}", response_model=Envelope[Output])
    def update_one(
        option_id: str,
        body: UpdateSchema,
        service: OptionService = Depends(get_service),
    ):
        return envelope(service.update_one(option_id, body), f"{label} updated successfully")

    @router.put("/update/many", response_model=Envelope[list[Output]])
    def update_many(
        body: list[UpdateItemSchema] = Body(...),
        service: OptionService = Depends(get_service),
    ):
        options = service.update_many(body)
        return envelope(options, f"{len(options)} {label}s updated successfully")

    @router.put("/update/hard/one/{option_id}", response_model=Envelope[Output])
    def hard_update_one(
        option_id: str,
        body: UpdateSchema,
        service: OptionService = Depends(get_service),
    ):
        return envelope(
            service.hard_update_one(option_id, body), f"{label} hard updated successfully"
        )

    @router.put("/update/hard/all", response_model=Envelope[list[Output]])
    def hard_update_many(
        body: list[UpdateItemSchema] = Body(...),
        service: OptionService = Depends(get_service),
    ):
        options = service.hard_update_many(body)
        return envelope(options, f"{len(options)} {label}s hard updated successfully")

    # =========================================================================
    # Soft delete
    # =========================================================================

    @router.delete("/soft/delete/one/{option_id}", response_model=Envelope[Output])
    def soft_delete_one(option_id: str, service: OptionService = Depends(get_service)):
        return envelope(service.soft_delete_one(option_id), f"{label} soft deleted successfully")

    @router.put("/soft/delete/many", response_model=Envelope[list[Output]])
    def soft_delete_many(
        ids: list[Optional[OptionId]] = Body(...),
        service: OptionService = Depends(get_service),
    ):
        options = service.soft_delete_many(ids)
        return envelope(options, f"{len(options)} {label}s soft deleted successfully")

    # =========================================================================
    # Hard delete (fixed paths before /hard/delete/{option_id})
    # =========================================================================

    @router.delete("/hard/delete/many", response_model=Envelope[list[Output]])
    def hard_delete_many(
        ids: list[Optional[OptionId]] = Body(...),
        service: OptionService = Depends(get_service),
    ):
        options = service.hard_delete_many(ids)
        return envelope(options, f"{len(options)} {label}s hard deleted successfully")

    @router.delete("/hard/delete/all", response_model=Envelope[int])
    def hard_delete_all(service: OptionService = Depends(get_service)):
        removed = service.hard_delete_all()
        return envelope(removed, f"All {label}s hard deleted successfully")

    @router.delete("/hard/delete/{option_id}", response_model=Envelope[Output])
    def hard_delete_one(option_id: str, service: OptionService = Depends(get_service)):
        return envelope(service.hard_delete_one(option_id), f"{label} hard deleted successfully")

    return router


# =============================================================================
# Registry index
# =============================================================================

index_router = APIRouter(prefix="/api", tags=["options"])


@index_router.get("/options", response_model=list[OptionKindOutput])
def list_option_kinds() -> list[dict[str, Any]]:
    """Registered option kinds and the shape of their records."""
    return [
        {
            "slug": entity.slug,
            "label": entity.label,
            "path": f"/api/{entity.slug}",
            "id_strategy": entity.id_strategy,
            "fields": list(entity.field_names),
            "unique_fields": list(entity.unique_fields),
            "exportable": entity.exportable,
        }
        for entity in OPTION_ENTITIES.values()
    ]


def register_option_routers(app: FastAPI) -> None:
    """Mount the index and one router per registered kind."""
    app.include_router(index_router)
    for entity in OPTION_ENTITIES.values():
        app.include_router(build_option_router(entity))
