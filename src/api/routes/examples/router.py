"""Endpoints HTTP de Examples.

Erros de aplicação sobem como AppError e são renderizados pelos handlers
registrados em `api.routes.errors`. Após escrita bem-sucedida, o evento
correspondente é publicado em background (falha de publicação não afeta
a resposta).
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from api.routes.examples.dependencies import get_container, get_use_case
from api.routes.examples.dto import (
    CreateExampleRequestDTO,
    ErrorResponseDTO,
    ExampleResponseDTO,
    ListExamplesResponseDTO,
    SuccessResponseDTO,
    UpdateExampleRequestDTO,
)
from app.bootstrap import Container
from app.infra.messaging import current_event_metadata
from app.use_cases.examples import (
    ExampleUseCase,
    ExampleWithMetadata,
    ListExamplesRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        400: {"model": ErrorResponseDTO},
        404: {"model": ErrorResponseDTO},
        422: {"model": ErrorResponseDTO},
        500: {"model": ErrorResponseDTO},
    },
)

UseCaseDep = Annotated[ExampleUseCase, Depends(get_use_case)]
ContainerDep = Annotated[Container, Depends(get_container)]


# ──────────────────────────────────────────────────────────────────────────────
# Publicação de eventos
# ──────────────────────────────────────────────────────────────────────────────


def _publish_saved(container: Container, result: ExampleWithMetadata, *, created: bool) -> None:
    publisher = container.publisher
    if publisher is None:
        return
    example = result.example
    external_data = result.external_data.to_dict() if result.external_data else None
    metadata = current_event_metadata()
    if created:
        coroutine = publisher.publish_created(
            example, external_data=external_data, enrichment=result.enrichment, metadata=metadata
        )
        name = f"publish_created:{example.id}"
    else:
        coroutine = publisher.publish_updated(
            example, external_data=external_data, enrichment=result.enrichment, metadata=metadata
        )
        name = f"publish_updated:{example.id}"
    container.task_runner.spawn(name, coroutine)


# ──────────────────────────────────────────────────────────────────────────────
# Endpoints
# ──────────────────────────────────────────────────────────────────────────────


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ExampleResponseDTO)
async def create_example(
    payload: CreateExampleRequestDTO,
    use_case: UseCaseDep,
    container: ContainerDep,
) -> ExampleResponseDTO:
    result = await use_case.create_example(payload.to_request())
    _publish_saved(container, result, created=True)
    return ExampleResponseDTO.from_result(result)


@router.get("", response_model=ListExamplesResponseDTO)
async def list_examples(
    use_case: UseCaseDep,
    limit: Annotated[int, Query(description="Tamanho da página (<=0 usa o padrão)")] = 10,
    offset: Annotated[int, Query(description="Deslocamento (negativo vira 0)")] = 0,
) -> ListExamplesResponseDTO:
    response = await use_case.list_examples(ListExamplesRequest(limit=limit, offset=offset))
    return ListExamplesResponseDTO.from_response(response)


@router.post("/validate", status_code=status.HTTP_201_CREATED, response_model=ExampleResponseDTO)
async def validate_and_create_example(
    payload: CreateExampleRequestDTO,
    use_case: UseCaseDep,
    container: ContainerDep,
) -> ExampleResponseDTO:
    result = await use_case.validate_and_create_example(payload.to_request())
    _publish_saved(container, result, created=True)
    return ExampleResponseDTO.from_result(result)


@router.get("/email/{email}", response_model=ExampleResponseDTO)
async def get_example_by_email(email: str, use_case: UseCaseDep) -> ExampleResponseDTO:
    return ExampleResponseDTO.from_result(await use_case.get_example_by_email(email))


@router.get("/{example_id}", response_model=ExampleResponseDTO)
async def get_example(example_id: str, use_case: UseCaseDep) -> ExampleResponseDTO:
    return ExampleResponseDTO.from_result(await use_case.get_example(example_id))


@router.put("/{example_id}", response_model=ExampleResponseDTO)
async def update_example(
    example_id: str,
    payload: UpdateExampleRequestDTO,
    use_case: UseCaseDep,
    container: ContainerDep,
) -> ExampleResponseDTO:
    result = await use_case.update_example(example_id, payload.to_request())
    _publish_saved(container, result, created=False)
    return ExampleResponseDTO.from_result(result)


@router.delete("/{example_id}", response_model=SuccessResponseDTO)
async def delete_example(
    example_id: str,
    use_case: UseCaseDep,
    container: ContainerDep,
) -> SuccessResponseDTO:
    example = await use_case.delete_example(example_id)
    if container.publisher is not None:
        container.task_runner.spawn(
            f"publish_deleted:{example.id}",
            container.publisher.publish_deleted(
                example.id, example.email, example.name, metadata=current_event_metadata()
            ),
        )
    logger.info("example_delete_request_completed", extra={"example_id": example_id})
    return SuccessResponseDTO(message="Example deleted successfully")
