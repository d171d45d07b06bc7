from app.models.asset import ConsumableGoods, Equipment, LabEquipment
from app.models.bank_account import BankAccount
from app.models.contractor import Contractor
from app.models.creditor import Creditor
from app.models.daily_report import DailyReport
from app.models.expense import Expense
from app.models.labour import Labour, LabourAttendance
from app.models.ledger_entry import BankLedgerEntry, CreditorLedgerEntry
from app.models.machine import Machine, MachineAssignment, MachineRentPause
from app.models.notification import Notification
from app.models.payments import ContractorPayment, CreditorPayment, LabourPayment, VendorPayment
from app.models.project import Project
from app.models.stock import Stock, StockOut
from app.models.transaction import Transaction
from app.models.transfer import Transfer
from app.models.user import User
from app.models.vendor import Vendor

__all__ = [
    "BankAccount",
    "BankLedgerEntry",
    "ConsumableGoods",
    "Contractor",
    "ContractorPayment",
    "Creditor",
    "CreditorLedgerEntry",
    "CreditorPayment",
    "DailyReport",
    "Equipment",
    "Expense",
    "LabEquipment",
    "Labour",
    "LabourAttendance",
    "LabourPayment",
    "Machine",
    "MachineAssignment",
    "MachineRentPause",
    "Notification",
    "Project",
    "Stock",
    "StockOut",
    "Transaction",
    "Transfer",
    "User",
    "Vendor",
]
