"""API endpoints for savings goals."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.dependencies import get_db, get_current_user_id
from app.models.goal import Goal
from app.schemas.goal import GoalCreate, GoalUpdate, GoalProgress, GoalResponse

router = APIRouter(prefix="/goals", tags=["goals"])

DEFAULT_ICON = "🎯"


def _get_owned(db: Session, user_id: str, goal_id: str) -> Goal:
    goal = db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == user_id).first()
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.get("", response_model=List[GoalResponse])
def get_goals(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get all goals, nearest deadline first."""
    return db.query(Goal).filter(Goal.user_id == user_id).order_by(Goal.deadline.asc()).all()


@router.get("/{goal_id}", response_model=GoalResponse)
def get_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single goal."""
    return _get_owned(db, user_id, goal_id)


@router.post("", response_model=GoalResponse, status_code=201)
def create_goal(
    data: GoalCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a goal with no progress yet."""
    goal = Goal(
        user_id=user_id,
        name=data.name,
        target_amount=data.target_amount,
        deadline=data.deadline,
        icon=data.icon or DEFAULT_ICON,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


@router.put("/{goal_id}", response_model=GoalResponse)
def update_goal(
    goal_id: str,
    update: GoalUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update a goal."""
    update_data = update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    goal = _get_owned(db, user_id, goal_id)
    for field, value in update_data.items():
        setattr(goal, field, value)

    db.commit()
    db.refresh(goal)
    return goal


@router.post("/{goal_id}/progress", response_model=GoalResponse)
def add_progress(
    goal_id: str,
    progress: GoalProgress,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Add money saved towards a goal."""
    # Increment in SQL so concurrent deposits are not lost
    updated = db.query(Goal).filter(
        Goal.id == goal_id,
        Goal.user_id == user_id
    ).update(
        {Goal.current_amount: Goal.current_amount + progress.amount},
        synchronize_session=False
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Goal not found")

    db.commit()
    return _get_owned(db, user_id, goal_id)


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a goal."""
    goal = _get_owned(db, user_id, goal_id)
    db.delete(goal)
    db.commit()
    return {"deleted": True}
