"""
Study sections and the PDFs filed under them
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..auth import require_user
from ..database import get_db
from ..models import PdfCreate, PdfUpdate, SectionCreate, SectionUpdate
from ..responses import listing, ok
from ..store import Store, pdfs_store, sections_store

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_user)])

# Base64 PDFs are large; only the detail route returns them
HEAVY_FIELDS = ("fileData",)


def get_sections(db: AsyncIOMotorDatabase = Depends(get_db)) -> Store:
    return sections_store(db)


def get_pdfs(db: AsyncIOMotorDatabase = Depends(get_db)) -> Store:
    return pdfs_store(db)


def without_file_data(pdf: dict) -> dict:
    return {key: value for key, value in pdf.items() if key not in HEAVY_FIELDS}

# =====================================================================================
# SECTIONS
# =====================================================================================

@router.get("/sections")
async def list_sections(sections: Store = Depends(get_sections)):
    return listing(await sections.find())


@router.get("/sections/{section_id}")
async def get_section(section_id: str, sections: Store = Depends(get_sections)):
    return ok(await sections.get(section_id))


@router.post("/sections", status_code=status.HTTP_201_CREATED)
async def create_section(payload: SectionCreate, sections: Store = Depends(get_sections)):
    section = await sections.insert(payload.model_dump(by_alias=True))
    return ok(section, message="Section created! 📁")


@router.put("/sections/{section_id}")
async def update_section(section_id: str, payload: SectionUpdate, sections: Store = Depends(get_sections)):
    section = await sections.update(section_id, payload.changes())
    return ok(section, message="Section updated! ✨")


async def delete_section_cascade(section_id: str, sections: Store, pdfs: Store) -> int:
    """
    Delete a section and every PDF filed under it.

    Not transactional: if the section delete fails after the PDFs are gone,
    calling this again finishes the job (deleting zero PDFs is fine).
    """
    await sections.get(section_id)
    removed = await pdfs.delete_many({"sectionId": section_id})
    await sections.delete(section_id)
    logger.info(f"Section {section_id} deleted with {removed} PDFs")
    return removed


@router.delete("/sections/{section_id}")
async def delete_section(
    section_id: str,
    sections: Store = Depends(get_sections),
    pdfs: Store = Depends(get_pdfs),
):
    removed = await delete_section_cascade(section_id, sections, pdfs)
    return ok({"deletedPdfs": removed}, message="Section and all its PDFs deleted! 🗑️")

# =====================================================================================
# PDFs
# =====================================================================================

@router.get("/pdfs")
async def list_pdfs(
    sectionId: Optional[str] = None,
    favorite: Optional[str] = None,
    pdfs: Store = Depends(get_pdfs),
):
    """List PDFs without their file data"""
    filters = {}
    if sectionId:
        filters["sectionId"] = sectionId
    if favorite == "true":
        filters["isFavorite"] = True
    return listing(await pdfs.find(filters, exclude=HEAVY_FIELDS))


@router.get("/pdfs/{pdf_id}")
async def get_pdf(pdf_id: str, pdfs: Store = Depends(get_pdfs)):
    """Single PDF including its file data"""
    return ok(await pdfs.get(pdf_id))


@router.post("/pdfs", status_code=status.HTTP_201_CREATED)
async def create_pdf(
    payload: PdfCreate,
    sections: Store = Depends(get_sections),
    pdfs: Store = Depends(get_pdfs),
):
    """Upload a PDF into an existing section"""
    await sections.get(payload.section_id)
    pdf = await pdfs.insert(payload.model_dump(by_alias=True))
    return ok(without_file_data(pdf), message="PDF uploaded successfully! 📄")


@router.patch("/pdfs/{pdf_id}")
async def update_pdf(pdf_id: str, payload: PdfUpdate, pdfs: Store = Depends(get_pdfs)):
    """Update reading progress, favorite flag or name"""
    pdf = await pdfs.update(pdf_id, payload.changes(), exclude=HEAVY_FIELDS)
    return ok(pdf, message="PDF updated! ✨")


@router.patch("/pdfs/{pdf_id}/favorite")
async def toggle_favorite(pdf_id: str, pdfs: Store = Depends(get_pdfs)):
    """Flip the favorite flag and return only the new value"""
    pdf = await pdfs.get(pdf_id, exclude=HEAVY_FIELDS)
    pdf = await pdfs.update(pdf_id, {"isFavorite": not pdf.get("isFavorite", False)}, exclude=HEAVY_FIELDS)
    return ok(
        {"isFavorite": pdf["isFavorite"]},
        message="Added to favorites! ⭐" if pdf["isFavorite"] else "Removed from favorites",
    )


@router.delete("/pdfs/{pdf_id}")
async def delete_pdf(pdf_id: str, pdfs: Store = Depends(get_pdfs)):
    await pdfs.delete(pdf_id)
    return ok(message="PDF deleted! 🗑️")
