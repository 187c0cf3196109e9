"""Sample categories and events for development databases."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Tuple

from sqlalchemy.orm import Session

from ..models.category import Category
from ..models.event import Event
from .db_core import db

logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = [
    ('Fun Run', 'Charity running events suitable for all ages'),
    ('Gala Dinner', 'Formal charity dinners with speeches and auctions'),
    ('Silent Auction', 'Silent auction events with secret bidding'),
    ('Concert', 'Charity music performances'),
    ('Workshop', 'Educational workshops for skill development'),
    ('Sports Tournament', 'Sports competitions for charity'),
]

SAMPLE_EVENTS = [
    {
        'name': 'Annual Charity Run 2025',
        'short_description': 'Join our 5km charity run to support children education',
        'full_description': (
            'This is our 10th annual charity run! All proceeds will directly support local school '
            'education programs. Event includes 5km run, kids fun run, and family entertainment area. '
            'Water stations, first aid, and finishing medals provided.'
        ),
        'date_time': datetime(2025, 10, 15, 8, 0),
        'location': 'City Central Park',
        'address': '123 Park Avenue, City Central',
        'category': 'Fun Run',
        'ticket_price': '25.00', 'ticket_type': 'paid',
        'goal_amount': '10000.00', 'current_amount': '6500.00',
        'max_attendees': 500,
    },
    {
        'name': 'Gala Dinner for Children Hospital',
        'short_description': 'Elegant charity dinner supporting children hospital equipment',
        'full_description': (
            'Join us for a special evening supporting our local children hospital. Event includes '
            'three-course dinner, live music, silent auction, and inspiring speeches. '
            'Business attire required.'
        ),
        'date_time': datetime(2025, 11, 20, 19, 0),
        'location': 'Grand Hotel Ballroom',
        'address': '456 Luxury Street, Uptown District',
        'category': 'Gala Dinner',
        'ticket_price': '150.00', 'ticket_type': 'paid',
        'goal_amount': '50000.00', 'current_amount': '32500.00',
        'max_attendees': 200,
    },
    {
        'name': 'Art for Heart Silent Auction',
        'short_description': 'Silent auction of artworks donated by local artists',
        'full_description': (
            'Browse and bid on wonderful artworks donated by local established and emerging artists. '
            'All proceeds support heart disease research. Drinks and snacks provided.'
        ),
        'date_time': datetime(2025, 9, 30, 18, 0),
        'location': 'Community Art Center',
        'address': '789 Art Lane, Cultural District',
        'category': 'Silent Auction',
        'ticket_price': '0.00', 'ticket_type': 'free',
        'goal_amount': '15000.00', 'current_amount': '8200.00',
        'max_attendees': 150,
    },
    {
        'name': 'Rock for Rescue Concert',
        'short_description': 'Rock concert supporting animal rescue organization',
        'full_description': (
            'Enjoy an evening of music featuring local bands performing classic rock. All ticket '
            'proceeds support medical and care costs for animal rescue organization.'
        ),
        'date_time': datetime(2025, 12, 5, 20, 0),
        'location': 'Downtown Music Hall',
        'address': '321 Sound Street, Entertainment District',
        'category': 'Concert',
        'ticket_price': '35.00', 'ticket_type': 'paid',
        'goal_amount': '20000.00', 'current_amount': '12500.00',
        'max_attendees': 300,
    },
    {
        'name': 'Coding for Kids Workshop',
        'short_description': 'Free programming workshop introducing kids to computer science',
        'full_description': (
            'In this interactive workshop, children will learn programming basics. Suitable for '
            'ages 8-12. Pre-registration required. Donations optional.'
        ),
        'date_time': datetime(2025, 10, 25, 10, 0),
        'location': 'Tech Innovation Center',
        'address': '654 Code Avenue, Tech Park',
        'category': 'Workshop',
        'ticket_price': '0.00', 'ticket_type': 'free',
        'goal_amount': '5000.00', 'current_amount': '3200.00',
        'max_attendees': 30,
    },
    {
        'name': 'Charity Basketball Tournament',
        'short_description': '3v3 basketball competition supporting youth sports programs',
        'full_description': (
            'Form your team for this exciting 3v3 basketball tournament! All skill levels welcome. '
            'Prizes include trophies and sports equipment.'
        ),
        'date_time': datetime(2025, 11, 12, 9, 0),
        'location': 'City Sports Complex',
        'address': '987 Sport Way, Athletic District',
        'category': 'Sports Tournament',
        'ticket_price': '15.00', 'ticket_type': 'paid',
        'goal_amount': '8000.00', 'current_amount': '4500.00',
        'max_attendees': 100,
    },
    {
        'name': 'Winter Gala for Homeless Shelter',
        'short_description': 'Winter charity dinner raising funds for homeless shelter',
        'full_description': (
            'Join us this holiday season to support the homeless shelter. Event includes dinner, '
            'dancing, and raffle prizes.'
        ),
        'date_time': datetime(2025, 12, 15, 18, 30),
        'location': 'Riverside Convention Center',
        'address': '147 Event Boulevard, Riverside',
        'category': 'Gala Dinner',
        'ticket_price': '75.00', 'ticket_type': 'paid',
        'goal_amount': '25000.00', 'current_amount': '18000.00',
        'max_attendees': 250,
    },
    {
        'name': 'Sunset Yoga for Mental Health',
        'short_description': 'Sunset yoga class supporting mental health awareness',
        'full_description': (
            'Join a relaxing yoga class against the beautiful backdrop of park sunset. All levels '
            'welcome. Please bring your own yoga mat.'
        ),
        'date_time': datetime(2025, 9, 20, 17, 30),
        'location': 'Sunset Park',
        'address': '258 Serenity Road, Westside',
        'category': 'Workshop',
        'ticket_price': '20.00', 'ticket_type': 'paid',
        'goal_amount': '3000.00', 'current_amount': '2100.00',
        'max_attendees': 50,
    },
    {
        'name': 'Cancelled: Summer Festival 2025',
        'short_description': 'Summer festival cancelled due to weather conditions',
        'full_description': 'This event has been cancelled. All purchased tickets will be fully refunded.',
        'date_time': datetime(2025, 8, 10, 12, 0),
        'location': 'City Park',
        'address': None,
        'category': 'Concert',
        'ticket_price': '0.00', 'ticket_type': 'free',
        'goal_amount': '10000.00', 'current_amount': '0.00',
        'max_attendees': None,
        'is_active': False,
    },
]


def _insert_samples(session: Session) -> Tuple[int, int]:
    categories = {}
    for name, description in SAMPLE_CATEGORIES:
        category = session.query(Category).filter(Category.name == name).first()
        if category is None:
            category = Category(name=name, description=description)
            session.add(category)
        categories[name] = category
    session.flush()

    added = 0
    for data in SAMPLE_EVENTS:
        exists = session.query(Event).filter(
            Event.name == data['name'], Event.date_time == data['date_time']
        ).first()
        if exists:
            continue
        session.add(Event(
            name=data['name'],
            short_description=data['short_description'],
            full_description=data['full_description'],
            date_time=data['date_time'],
            location=data['location'],
            address=data['address'],
            category_id=categories[data['category']].id,
            ticket_price=Decimal(data['ticket_price']),
            ticket_type=data['ticket_type'],
            goal_amount=Decimal(data['goal_amount']),
            current_amount=Decimal(data['current_amount']),
            is_active=data.get('is_active', True),
            max_attendees=data['max_attendees'],
        ))
        added += 1
    return len(categories), added


def seed_database(reset: bool = False) -> Tuple[int, int]:
    """
    Insert the sample categories and events.

    Existing rows with the same name (and date, for events) are left alone,
    so seeding twice adds nothing.

    Args:
        reset: Drop and recreate every table first

    Returns:
        Tuple of (categories present, events added)
    """
    if reset:
        db.drop_all()
    db.init_db()

    with db.session() as session:
        category_count, event_count = _insert_samples(session)
    logger.info(f"Seeded {category_count} categories and {event_count} new events")
    return category_count, event_count
