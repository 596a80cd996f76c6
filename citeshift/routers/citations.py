"""Citation editing API endpoints."""

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException

from citeshift.config import get_settings
from citeshift.exceptions import CitationEditError
from citeshift.models.schemas import (
    AnnotationRequest,
    DocumentContext,
    EditResult,
    InsertKeysRequest,
    KeyCandidate,
    KeyReplaceRequest,
    KeySuggestion,
    Motion,
    ShiftDirection,
    StyleChoice,
    StyleUpdateRequest,
)
from citeshift.services.bibliography import Bibliography
from citeshift.services.citation_editor import CitationEditor

router = APIRouter()


@lru_cache
def get_editor() -> CitationEditor:
    """Editor built from settings, bibliography loaded once."""
    settings = get_settings()
    bibliography = Bibliography()
    if settings.bibliography_path:
        bibliography = Bibliography.from_file(settings.bibliography_path)
    return CitationEditor(config=settings.editor_config(), bibliography=bibliography)


def _run(operation, *args):
    """Call an editor operation, turning edit errors into 400 responses."""
    try:
        return operation(*args)
    except CitationEditError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/styles", response_model=list[StyleChoice])
async def list_styles(editor: CitationEditor = Depends(get_editor)):
    """List available citation styles and their export commands."""
    return editor.styles.choices()


@router.post("/style/select", response_model=list[StyleChoice])
async def select_style(request: DocumentContext, editor: CitationEditor = Depends(get_editor)):
    """Styles for the citation at the offset, with the current one flagged."""
    return _run(editor.select_style, request.text, request.offset)


@router.post("/style", response_model=EditResult)
async def update_style(request: StyleUpdateRequest, editor: CitationEditor = Depends(get_editor)):
    """Set or remove the style of the citation at the offset."""
    return _run(editor.update_style, request.text, request.offset, request.style)


@router.post("/navigate/{motion}", response_model=EditResult)
async def navigate(motion: Motion, request: DocumentContext, editor: CitationEditor = Depends(get_editor)):
    """Move to the next/previous reference or to the citation start/end."""
    return _run(editor.move, request.text, request.offset, motion)


@router.post("/shift/{direction}", response_model=EditResult)
async def shift_reference(
    direction: ShiftDirection,
    request: DocumentContext,
    editor: CitationEditor = Depends(get_editor),
):
    """Swap the reference at the offset with its left or right neighbour."""
    return _run(editor.shift, request.text, request.offset, direction)


@router.post("/sort/year", response_model=EditResult)
async def sort_by_year(request: DocumentContext, editor: CitationEditor = Depends(get_editor)):
    """Sort the citation's references newest first."""
    return _run(editor.sort_by_year, request.text, request.offset)


@router.post("/reference/delete", response_model=EditResult)
async def delete_reference(request: DocumentContext, editor: CitationEditor = Depends(get_editor)):
    return _run(editor.delete_reference, request.text, request.offset)


@router.post("/reference/kill", response_model=EditResult)
async def kill_reference(request: DocumentContext, editor: CitationEditor = Depends(get_editor)):
    return _run(editor.kill_reference, request.text, request.offset)


@router.post("/reference/copy", response_model=EditResult)
async def copy_reference(request: DocumentContext, editor: CitationEditor = Depends(get_editor)):
    return _run(editor.copy_reference, request.text, request.offset)


@router.post("/reference/mark", response_model=EditResult)
async def mark_reference(request: DocumentContext, editor: CitationEditor = Depends(get_editor)):
    return _run(editor.mark_reference, request.text, request.offset)


@router.post("/reference/annotation", response_model=EditResult)
async def update_annotation(request: AnnotationRequest, editor: CitationEditor = Depends(get_editor)):
    """
    Rewrite the prefix and suffix of the reference at the offset.

    Placement warnings are returned with the edit, which is applied anyway.
    """
    return _run(editor.update_annotation, request.text, request.offset, request.prefix, request.suffix)


@router.post("/reference/suggestions", response_model=list[KeySuggestion])
async def suggest_keys(request: DocumentContext, editor: CitationEditor = Depends(get_editor)):
    """Bibliography keys ranked by closeness to the key at the offset."""
    return _run(editor.suggest_keys, request.text, request.offset)


@router.post("/reference/key", response_model=EditResult)
async def replace_key(request: KeyReplaceRequest, editor: CitationEditor = Depends(get_editor)):
    return _run(editor.replace_key, request.text, request.offset, request.key)


@router.post("/reference/insert", response_model=EditResult)
async def insert_keys(request: InsertKeysRequest, editor: CitationEditor = Depends(get_editor)):
    """Insert references after the one at the offset, or a new citation."""
    return _run(editor.insert_keys, request.text, request.offset, request.keys)


@router.get("/keys", response_model=list[KeyCandidate])
async def list_keys(editor: CitationEditor = Depends(get_editor)):
    """Completion candidates from the bibliography."""
    return editor.key_candidates()
