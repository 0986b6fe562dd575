import uuid
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from src.repository import contacts as repository_contacts
from src.schemas.contact import Contact, ContactCreate, ContactUpdate, ContactList, FavoriteModel
from src.schemas.user import MessageResponse
from src.conf.db import get_db
from src.services.auth import auth_service
from src.models.user import User

router = APIRouter(tags=["contacts"])


def parse_contact_id(contact_id: str | None) -> uuid.UUID:
    """
    Parse a contact id from the request.

    :raises HTTPException: 400 Bad Request if the id is missing or malformed.
    """
    if not contact_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No ID specified.")
    try:
        return uuid.UUID(contact_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please enter a valid ID")


@router.post("/contact", response_model=Contact, status_code=status.HTTP_201_CREATED)
def create_contact(contact: ContactCreate, db: Session = Depends(get_db), current_user: User = Depends(auth_service.get_current_user)):
    """
    Create a new contact owned by the current user.

    :param contact: The contact data to create.
    :type contact: ContactCreate
    :param db: The database session.
    :type db: Session
    :param current_user: The currently authenticated user.
    :type current_user: User
    :return: The newly created contact.
    :rtype: Contact
    """
    return repository_contacts.create_contact(db=db, contact=contact, current_user=current_user)

@router.get("/mycontacts", response_model=ContactList)
def read_contacts(search: str | None = None, favorite: bool | None = None,
                  sort: Literal["name", "birthday"] | None = None, order: Literal["asc", "desc"] = "asc",
                  skip: int = Query(0, ge=0), limit: int | None = Query(None, ge=1, le=100),
                  db: Session = Depends(get_db), current_user: User = Depends(auth_service.get_current_user)):
    """
    Retrieve the current user's contacts, newest first.

    :param search: Optional case-insensitive substring of the contact name.
    :type search: str | None
    :param favorite: Optional filter on the favorite flag.
    :type favorite: bool | None
    :param sort: Optional sort by ``name`` or ``birthday``.
    :type sort: str | None
    :param order: Direction of ``sort``, ``asc`` or ``desc``.
    :type order: str
    :param skip: The number of contacts to skip (for pagination).
    :type skip: int
    :param limit: The maximum number of contacts to return (for pagination).
    :type limit: int | None
    :param db: The database session.
    :type db: Session
    :param current_user: The currently authenticated user.
    :type current_user: User
    :return: The contacts wrapped in ``{"contacts": [...]}``.
    :rtype: ContactList
    """
    contacts = repository_contacts.get_contacts(db, current_user=current_user, search=search, favorite=favorite,
                                                sort=sort, order=order, skip=skip, limit=limit)
    return {"contacts": contacts}

@router.get("/contact/{contact_id}", response_model=Contact)
def read_contact(contact_id: str, db: Session = Depends(get_db), current_user: User = Depends(auth_service.get_current_user)):
    """
    Retrieve a single contact by its ID for the current user.

    :param contact_id: The ID of the contact to retrieve.
    :type contact_id: str
    :param db: The database session.
    :type db: Session
    :param current_user: The currently authenticated user.
    :type current_user: User
    :raises HTTPException: 400 Bad Request if the ID is malformed.
    :raises HTTPException: 404 Not Found if the contact does not exist or belongs to someone else.
    :return: The retrieved contact.
    :rtype: Contact
    """
    db_contact = repository_contacts.get_contact(db, contact_id=parse_contact_id(contact_id), current_user=current_user)
    if db_contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return db_contact

@router.put("/contact", response_model=Contact)
def update_contact(contact: ContactUpdate, db: Session = Depends(get_db), current_user: User = Depends(auth_service.get_current_user)):
    """
    Update the fields sent in the body on a contact of the current user.

    :param contact: The contact ID plus the fields to change.
    :type contact: ContactUpdate
    :param db: The database session.
    :type db: Session
    :param current_user: The currently authenticated user.
    :type current_user: User
    :raises HTTPException: 400 Bad Request if the ID is missing or malformed.
    :raises HTTPException: 404 Not Found if the contact does not exist or belongs to someone else.
    :return: The updated contact.
    :rtype: Contact
    """
    contact_id = parse_contact_id(contact.id)
    db_contact = repository_contacts.update_contact(db, contact_id=contact_id, contact=contact, current_user=current_user)
    if db_contact is None:
        raise HTTPException(status_code=404, detail="Contact not found.")
    return db_contact

@router.patch("/contact/{contact_id}/favorite", response_model=Contact)
def mark_favorite(contact_id: str, body: FavoriteModel, db: Session = Depends(get_db),
                  current_user: User = Depends(auth_service.get_current_user)):
    """
    Mark or unmark a contact of the current user as favorite.

    :raises HTTPException: 404 Not Found if the contact does not exist or belongs to someone else.
    """
    db_contact = repository_contacts.set_favorite(db, contact_id=parse_contact_id(contact_id),
                                                  favorite=body.favorite, current_user=current_user)
    if db_contact is None:
        raise HTTPException(status_code=404, detail="Contact not found.")
    return db_contact

@router.delete("/contact/{contact_id}", response_model=MessageResponse)
def delete_contact(contact_id: str, db: Session = Depends(get_db), current_user: User = Depends(auth_service.get_current_user)):
    """
    Delete a contact by its ID for the current user.

    :param contact_id: The ID of the contact to delete.
    :type contact_id: str
    :param db: The database session.
    :type db: Session
    :param current_user: The currently authenticated user.
    :type current_user: User
    :raises HTTPException: 404 Not Found if the contact does not exist or belongs to someone else.
    :return: A confirmation message.
    :rtype: MessageResponse
    """
    db_contact = repository_contacts.delete_contact(db, contact_id=parse_contact_id(contact_id), current_user=current_user)
    if db_contact is None:
        raise HTTPException(status_code=404, detail="Contact not found.")
    return {"message": "Contact deleted successfully!"}
