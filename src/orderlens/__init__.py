from .workspace import Workspace
from .orders.record import LineItem, OrderRecord, ORDER_TYPE, REFUND_TYPE
from .store.order_store import OrderStore, StoreNotFound, OrderNotFound
from .store.settings import StoreSettings
from .duplicates.signature import Signature, build_signature
from .duplicates.grouper import DuplicateGroup, group_duplicates, find_duplicates_for_customer
from .duplicates.scan import ScanResult, scan_for_duplicates
from .utils.validation import InvalidInput
