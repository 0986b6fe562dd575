import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session
from src.models.contact import Contact
from src.schemas.contact import ContactCreate, ContactUpdate
from src.models.user import User

# Names sort case-insensitively
SORT_FIELDS = {
    "name": func.lower(Contact.name),
    "birthday": Contact.birthday,
}


def get_contact(db: Session, contact_id: uuid.UUID, current_user: User):
    """
    Retrieves a single contact by its ID for a specific user.

    :param db: The database session.
    :type db: Session
    :param contact_id: The ID of the contact to retrieve.
    :type contact_id: uuid.UUID
    :param current_user: The currently authenticated user.
    :type current_user: User
    :return: The contact object if found, otherwise None.
    :rtype: Contact | None
    """
    return db.query(Contact).filter(Contact.id == contact_id, Contact.user_id == current_user.id).first()

def get_contacts(db: Session, current_user: User, search: str | None = None, favorite: bool | None = None,
                 sort: str | None = None, order: str = "asc", skip: int = 0, limit: int | None = None):
    """
    Retrieves the contacts of a specific user, newest first unless a sort field is given.

    :param db: The database session.
    :type db: Session
    :param current_user: The currently authenticated user.
    :type current_user: User
    :param search: Optional case-insensitive substring of the contact name.
    :type search: str | None
    :param favorite: Optional filter on the favorite flag.
    :type favorite: bool | None
    :param sort: Optional sort field, ``name`` or ``birthday``. Contacts without a value come last.
    :type sort: str | None
    :param order: Direction of ``sort``, ``asc`` or ``desc``.
    :type order: str
    :param skip: The number of contacts to skip (for pagination).
    :type skip: int
    :param limit: The maximum number of contacts to return, or None for all.
    :type limit: int | None
    :return: A list of contacts.
    :rtype: list[Contact]
    """
    query = db.query(Contact).filter(Contact.user_id == current_user.id)
    if search:
        query = query.filter(Contact.name.icontains(search, autoescape=True))
    if favorite is not None:
        query = query.filter(Contact.favorite == favorite)
    if sort in SORT_FIELDS:
        column = SORT_FIELDS[sort]
        direction = column.desc() if order == "desc" else column.asc()
        query = query.order_by(column.is_(None), direction, Contact.created_at.desc())
    else:
        query = query.order_by(Contact.created_at.desc())
    if skip:
        query = query.offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def create_contact(db: Session, contact: ContactCreate, current_user: User):
    """
    Creates a new contact for the current user.

    :param db: The database session.
    :type db: Session
    :param contact: The contact data to create.
    :type contact: ContactCreate
    :param current_user: The currently authenticated user.
    :type current_user: User
    :return: The newly created contact.
    :rtype: Contact
    """
    db_contact = Contact(**contact.model_dump(mode="json", by_alias=True, exclude={"birthday"}),
                         birthday=contact.birthday, user_id=current_user.id)
    db.add(db_contact)
    db.commit()
    db.refresh(db_contact)
    return db_contact

def update_contact(db: Session, contact_id: uuid.UUID, contact: ContactUpdate, current_user: User):
    """
    Updates the fields present in ``contact`` on a contact owned by the current user.

    :param db: The database session.
    :type db: Session
    :param contact_id: The ID of the contact to update.
    :type contact_id: uuid.UUID
    :param contact: The updated contact data.
    :type contact: ContactUpdate
    :param current_user: The currently authenticated user.
    :type current_user: User
    :return: The updated contact object if found, otherwise None.
    :rtype: Contact | None
    """
    db_contact = db.query(Contact).filter(Contact.id == contact_id, Contact.user_id == current_user.id).first()
    if db_contact:
        changes = contact.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude={"id", "birthday"})
        if "birthday" in contact.model_fields_set:
            changes["birthday"] = contact.birthday
        for key, value in changes.items():
            setattr(db_contact, key, value)
        db.commit()
        db.refresh(db_contact)
    return db_contact

def set_favorite(db: Session, contact_id: uuid.UUID, favorite: bool, current_user: User):
    """
    Sets the favorite flag on a contact owned by the current user.

    :return: The updated contact object if found, otherwise None.
    :rtype: Contact | None
    """
    db_contact = db.query(Contact).filter(Contact.id == contact_id, Contact.user_id == current_user.id).first()
    if db_contact:
        db_contact.favorite = favorite
        db.commit()
        db.refresh(db_contact)
    return db_contact

def delete_contact(db: Session, contact_id: uuid.UUID, current_user: User):
    """
    Deletes a contact by its ID for the current user.

    :param db: The database session.
    :type db: Session
    :param contact_id: The ID of the contact to delete.
    :type contact_id: uuid.UUID
    :param current_user: The currently authenticated user.
    :type current_user: User
    :return: The deleted contact object if found, otherwise None.
    :rtype: Contact | None
    """
    db_contact = db.query(Contact).filter(Contact.id == contact_id, Contact.user_id == current_user.id).first()
    if db_contact:
        db.delete(db_contact)
        db.commit()
    return db_contact
