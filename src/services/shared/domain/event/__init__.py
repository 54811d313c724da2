from .domain_event import DomainEvent as DomainEvent
from .domain_event import DomainEventPublisher as DomainEventPublisher
