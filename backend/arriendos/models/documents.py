"""Documentos mongoengine para DATABASE_TYPE=mongodb.

Los arriendos guardan los campos de presentación desnormalizados
(code, productName, clientRut, clientName) junto a clientId/productId.
"""

from datetime import datetime

from mongoengine import (
    BooleanField,
    DateTimeField,
    Document,
    FloatField,
    IntField,
    StringField,
)


class ClientDocument(Document):
    meta = {"collection": "clients", "indexes": ["rut"]}

    name = StringField(required=True)
    companyName = StringField(default="")
    companyDocument = StringField(default="")
    rut = StringField(default="")
    phoneNumber = StringField(default="")
    address = StringField(default="")
    creationDate = StringField(default="")
    frequentClient = StringField(default="")
    created = StringField(default="")
    photoFileName = StringField(null=True)
    createdAt = DateTimeField(default=datetime.utcnow)


class ProductDocument(Document):
    meta = {"collection": "products", "indexes": ["code"]}

    name = StringField(required=True)
    code = StringField(required=True)
    brand = StringField(default="")
    priceNet = FloatField(default=0)
    priceIva = FloatField(default=0)
    priceTotal = FloatField(default=0)
    priceWarranty = FloatField(default=0)
    rented = BooleanField(default=False)
    createdAt = DateTimeField(default=datetime.utcnow)
    updatedAt = DateTimeField(null=True)


class RentDocument(Document):
    meta = {"collection": "rents", "indexes": ["isFinished", "-createdAt"]}

    code = StringField(default="")
    productName = StringField(default="")
    clientRut = StringField(default="")
    clientName = StringField(default="")
    quantity = IntField(default=0)
    totalValuePerDay = FloatField(default=0)
    deliveryDate = StringField(default="")
    paymentMethod = StringField(null=True)
    warrantyValue = FloatField(default=0)
    warrantyType = StringField(null=True)
    isFinished = BooleanField(default=False)
    isPaid = BooleanField(default=False)
    totalDays = FloatField(null=True)
    totalPrice = FloatField(null=True)
    observations = StringField(null=True)
    createdAt = DateTimeField(default=datetime.utcnow)
    clientId = StringField(default="")
    productId = StringField(default="")


class UserDocument(Document):
    meta = {"collection": "users", "indexes": ["username"]}

    username = StringField(required=True)
    password = StringField(required=True)
    name = StringField(default="")
    role = StringField(default="user")
    membershipPaid = BooleanField(default=False)
