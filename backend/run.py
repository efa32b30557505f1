import os

import uvicorn

def main():
    """
    Run the FastAPI application using uvicorn
    """
    uvicorn.run(
        "stayll.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )

if __name__ == "__main__":
    main()
