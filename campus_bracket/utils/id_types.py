from typing import NewType

MatchId = NewType("MatchId", int)
ParticipantId = NewType("ParticipantId", int)
JoinRequestId = NewType("JoinRequestId", int)
TeamId = NewType("TeamId", int)
TeamMemberId = NewType("TeamMemberId", int)
TournamentId = NewType("TournamentId", int)
UserId = NewType("UserId", int)
