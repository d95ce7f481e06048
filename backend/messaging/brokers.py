"""
Message broker clients.

Services depend on the MessageBroker interface; the concrete client is chosen
by the MESSAGE_BROKER_BACKEND setting. Messages are keyed by order id so all
events of one order land on the same partition (routing key) in order.
"""
import json
import logging
from abc import ABC, abstractmethod

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.utils.module_loading import import_string
from kombu import Connection, Exchange

logger = logging.getLogger(__name__)


class BrokerError(Exception):
    """Raised when a message cannot be handed to the broker."""


class MessageBroker(ABC):

    @abstractmethod
    def send_message(self, topic, message, key=None):
        """Publishes one message. Raises BrokerError on failure."""
        pass


class KombuMessageBroker(MessageBroker):
    """
    Publishes JSON messages to a durable topic exchange named after the topic.

    The key is used as the routing key and is also sent as the
    `partition_key` header for consumers that shard by it.
    """

    def __init__(self, url=None, retry_policy=None):
        self.url = url or settings.MESSAGE_BROKER_URL
        self.retry_policy = retry_policy or {
            "max_retries": 3,
            "interval_start": 0,
            "interval_step": 1,
            "interval_max": 5,
        }
        self._exchanges = {}

    def _exchange(self, topic):
        if topic not in self._exchanges:
            self._exchanges[topic] = Exchange(topic, type="topic", durable=True)
        return self._exchanges[topic]

    def send_message(self, topic, message, key=None):
        body = json.dumps(message, cls=DjangoJSONEncoder)
        routing_key = str(key) if key is not None else topic
        try:
            with Connection(self.url) as connection:
                producer = connection.Producer()
                producer.publish(
                    body,
                    exchange=self._exchange(topic),
                    routing_key=routing_key,
                    content_type="application/json",
                    content_encoding="utf-8",
                    headers={"partition_key": routing_key},
                    declare=[self._exchange(topic)],
                    retry=True,
                    retry_policy=self.retry_policy,
                )
        except Exception as exc:
            raise BrokerError(f"Failed to publish to '{topic}': {exc}") from exc

        logger.debug(f"Published {message.get('event_type')} to {topic} with key {routing_key}")


class InMemoryMessageBroker(MessageBroker):
    """Keeps published messages in a list. Used for tests and local runs."""

    def __init__(self):
        self.sent = []
        self.fail_next = 0

    def send_message(self, topic, message, key=None):
        if self.fail_next:
            self.fail_next -= 1
            raise BrokerError("Broker unavailable")
        self.sent.append({"topic": topic, "message": message, "key": key})

    def events(self, event_type=None):
        messages = [entry["message"] for entry in self.sent]
        if event_type is None:
            return messages
        return [message for message in messages if message["event_type"] == event_type]


_broker = None


def get_message_broker():
    """Returns the process-wide broker configured by MESSAGE_BROKER_BACKEND."""
    global _broker
    if _broker is None:
        _broker = import_string(settings.MESSAGE_BROKER_BACKEND)()
    return _broker


def reset_message_broker():
    global _broker
    _broker = None
