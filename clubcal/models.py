# Standard library imports
import uuid
from datetime import datetime
from typing import Optional

# Third-party imports
import sqlalchemy as sa
import sqlalchemy.orm as so

# Local application imports
from clubcal import db


def _new_id():
    return str(uuid.uuid4())


class District(db.Model):
    __tablename__ = 'districts'

    kind = 'district'

    id: so.Mapped[str] = so.mapped_column(sa.String(36), primary_key=True, default=_new_id)
    name: so.Mapped[str] = so.mapped_column(sa.String(128), nullable=False, index=True)
    province: so.Mapped[Optional[str]] = so.mapped_column(sa.String(64), nullable=True)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    zones: so.Mapped[list['Zone']] = so.relationship('Zone', back_populates='district')

    def __repr__(self):
        return f"<District id={self.id}, name='{self.name}'>"


class Zone(db.Model):
    __tablename__ = 'zones'

    kind = 'zone'

    id: so.Mapped[str] = so.mapped_column(sa.String(36), primary_key=True, default=_new_id)
    name: so.Mapped[str] = so.mapped_column(sa.String(128), nullable=False, index=True)
    zone_letter: so.Mapped[Optional[str]] = so.mapped_column(sa.String(8), nullable=True)
    district_id: so.Mapped[str] = so.mapped_column(sa.String(36), sa.ForeignKey('districts.id'), nullable=False, index=True)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    district: so.Mapped['District'] = so.relationship('District', back_populates='zones')
    clubs: so.Mapped[list['Club']] = so.relationship('Club', back_populates='zone')

    def __repr__(self):
        return f"<Zone id={self.id}, name='{self.name}', district={self.district_id}>"


class Club(db.Model):
    __tablename__ = 'clubs'

    kind = 'club'

    id: so.Mapped[str] = so.mapped_column(sa.String(36), primary_key=True, default=_new_id)
    name: so.Mapped[str] = so.mapped_column(sa.String(128), nullable=False, index=True)
    city: so.Mapped[Optional[str]] = so.mapped_column(sa.String(128), nullable=True)
    club_type: so.Mapped[Optional[str]] = so.mapped_column(sa.String(16), nullable=True)  # Kinsmen, Kinette or Kin
    zone_id: so.Mapped[str] = so.mapped_column(sa.String(36), sa.ForeignKey('zones.id'), nullable=False, index=True)
    district_id: so.Mapped[str] = so.mapped_column(sa.String(36), sa.ForeignKey('districts.id'), nullable=False, index=True)
    website: so.Mapped[Optional[str]] = so.mapped_column(sa.String(255), nullable=True)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    zone: so.Mapped['Zone'] = so.relationship('Zone', back_populates='clubs')
    district: so.Mapped['District'] = so.relationship('District')

    def __repr__(self):
        return f"<Club id={self.id}, name='{self.name}', zone={self.zone_id}>"


class Event(db.Model):
    """
    A dated announcement posted on behalf of exactly one club, zone or district.

    entity_type/entity_id name the owning entity. club_id, zone_id and
    district_id are denormalized copies of the owner's position in the tree
    and are filled in by owned_by().
    """
    __tablename__ = 'events'

    id: so.Mapped[str] = so.mapped_column(sa.String(36), primary_key=True, default=_new_id)
    title: so.Mapped[Optional[str]] = so.mapped_column(sa.String(255), nullable=True)
    description: so.Mapped[Optional[str]] = so.mapped_column(sa.Text, nullable=True)
    location: so.Mapped[Optional[str]] = so.mapped_column(sa.String(255), nullable=True)
    start_date: so.Mapped[datetime] = so.mapped_column(sa.DateTime, nullable=False, index=True)
    end_date: so.Mapped[datetime] = so.mapped_column(sa.DateTime, nullable=False, index=True)
    visibility: so.Mapped[str] = so.mapped_column(sa.String(16), nullable=False, default='public', index=True)
    entity_type: so.Mapped[str] = so.mapped_column(sa.String(16), nullable=False, index=True)
    entity_id: so.Mapped[str] = so.mapped_column(sa.String(36), nullable=False, index=True)
    club_id: so.Mapped[Optional[str]] = so.mapped_column(sa.String(36), sa.ForeignKey('clubs.id'), nullable=True, index=True)
    zone_id: so.Mapped[Optional[str]] = so.mapped_column(sa.String(36), sa.ForeignKey('zones.id'), nullable=True, index=True)
    district_id: so.Mapped[Optional[str]] = so.mapped_column(sa.String(36), sa.ForeignKey('districts.id'), nullable=True, index=True)
    image_url: so.Mapped[Optional[str]] = so.mapped_column(sa.String(512), nullable=True)
    event_url: so.Mapped[Optional[str]] = so.mapped_column(sa.String(512), nullable=True)
    created_by_email: so.Mapped[Optional[str]] = so.mapped_column(sa.String(120), nullable=True)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    club: so.Mapped[Optional['Club']] = so.relationship('Club')
    zone: so.Mapped[Optional['Zone']] = so.relationship('Zone')
    district: so.Mapped[Optional['District']] = so.relationship('District')

    def __repr__(self):
        return f"<Event id={self.id}, title='{self.title}', owner={self.entity_type}:{self.entity_id}>"

    @classmethod
    def owned_by(cls, entity, **fields):
        """
        Build an event posted on behalf of a club, zone or district.

        Fills entity_type/entity_id and the denormalized club/zone/district
        columns from the owner's place in the tree. An event without an
        explicit end date ends on its start date. The owner must already
        have an id, so add and flush new entities first.
        """
        if entity.id is None:
            raise ValueError(f"{entity!r} has no id yet; flush it before adding events")

        if entity.kind == 'club':
            placement = {'club': entity, 'club_id': entity.id, 'zone_id': entity.zone_id, 'district_id': entity.district_id}
        elif entity.kind == 'zone':
            placement = {'zone': entity, 'zone_id': entity.id, 'district_id': entity.district_id}
        elif entity.kind == 'district':
            placement = {'district': entity, 'district_id': entity.id}
        else:
            raise ValueError(f"Unknown entity kind: {entity.kind!r}")

        if fields.get('end_date') is None and fields.get('start_date') is not None:
            fields['end_date'] = fields['start_date']

        return cls(entity_type=entity.kind, entity_id=entity.id, **placement, **fields)

    @property
    def owner(self):
        """The loaded owning entity, or None when it cannot be resolved."""
        owner = {
            'club': self.club,
            'zone': self.zone,
            'district': self.district,
        }.get(self.entity_type)
        if owner is not None and owner.id == self.entity_id:
            return owner
        return None

    @property
    def owner_name(self):
        """Display name of the owning entity, used for search and tooltips."""
        owner = self.owner
        return owner.name if owner is not None else None
