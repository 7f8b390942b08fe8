from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from paystack import PaystackClient, get_paystack
from schemas import PaymentInitRequest

router = APIRouter(prefix="/api/pay", tags=["Payments"])


@router.post("/paystack")
def init_paystack_payment(payload: PaymentInitRequest, paystack: PaystackClient = Depends(get_paystack)):
    data = paystack.initialize(payload.email, payload.amount)
    return {"message": "Paystack payment initiated", "data": data}


# Payment outcome isn't stored here; the caller records it against its order
@router.get("/paystack/verify/{reference}")
def verify_paystack_payment(reference: str, paystack: PaystackClient = Depends(get_paystack)):
    data = paystack.verify(reference)
    if data.get("status") == "success":
        return {"verified": True, "data": data}
    return JSONResponse(status_code=400, content={"verified": False, "data": data})
